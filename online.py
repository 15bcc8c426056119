"""Live play on minesweeper.online through a Selenium-driven Chrome."""

from __future__ import annotations

import logging
import re
import time
from typing import List, Optional

from selenium import webdriver
from selenium.common.exceptions import NoSuchElementException, WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from webdriver_manager.chrome import ChromeDriverManager

from config import LOG_LEVEL, OnlineConfig
from errors import CellLookupError
from solver.deduction import AnalysisMode
from solver.driver import LocalRuleSolver
from solver.utils import Action, BoardSnapshot, GameState, SnapshotCell

logger = logging.getLogger(__name__)

CELL_CLASS = "cell"
OPENED_CLASS = "hd_opened"
FLAG_CLASS = "hd_flag"
FACE_ID = "top_area_face"
FACE_WIN_CLASS = "hd_top-area-face-win"
FACE_LOSE_CLASS = "hd_top-area-face-lose"
START_CLASS = "start"

_TYPE_RE = re.compile(r"\bhd_type(\d)\b")


def parse_cell(element: WebElement) -> SnapshotCell:
    """Read one ``div.cell`` into a SnapshotCell."""
    try:
        x = int(element.get_attribute("data-x"))
        y = int(element.get_attribute("data-y"))
    except (TypeError, ValueError):
        raise CellLookupError(
            f"Cell element {element.get_attribute('id')!r} has no usable coordinates."
        ) from None

    classes = (element.get_attribute("class") or "").split()
    discovered = OPENED_CLASS in classes
    flagged = FLAG_CLASS in classes

    count: Optional[int] = None
    if discovered:
        match = _TYPE_RE.search(" ".join(classes))
        if match:
            count = int(match.group(1))

    return SnapshotCell(x=x, y=y, discovered=discovered, flagged=flagged, count=count)


class OnlineBoard:
    """
    BoardSource and ActionSink backed by a live game page.

    The page is the only source of truth: every snapshot re-reads the DOM,
    so the solver should use AnalysisMode.SNAPSHOT_AUTHORITATIVE with it.
    """

    def __init__(self, driver: WebDriver, delay: float = 0.05) -> None:
        self.driver = driver
        self.delay = delay

    # ------------------------------------------------------------------
    # Source
    # ------------------------------------------------------------------
    def state(self) -> GameState:
        if self.driver.find_elements(By.CLASS_NAME, FACE_WIN_CLASS):
            return GameState.WON
        if self.driver.find_elements(By.CLASS_NAME, FACE_LOSE_CLASS):
            return GameState.LOST
        return GameState.RUNNING

    def snapshot(self) -> BoardSnapshot:
        elements = self.driver.find_elements(By.CLASS_NAME, CELL_CLASS)
        cells = [parse_cell(element) for element in elements]
        return BoardSnapshot.from_cells(cells, state=self.state())

    # ------------------------------------------------------------------
    # Sink
    # ------------------------------------------------------------------
    def _cell_element(self, x: int, y: int) -> WebElement:
        try:
            return self.driver.find_element(By.ID, f"cell_{x}_{y}")
        except NoSuchElementException:
            raise CellLookupError(f"No cell element for ({x}, {y}) on the page.") from None

    def apply(self, action: Action) -> None:
        element = self._cell_element(action.x, action.y)
        if action.kind == "reveal":
            element.click()
            time.sleep(self.delay)
        elif action.kind == "flag":
            ActionChains(self.driver).context_click(element).perform()
        else:
            raise ValueError(f"Unknown action: {action.kind}")
        logger.debug("Applied %s at (%d, %d)", action.kind, action.x, action.y)

    # ------------------------------------------------------------------
    # Game control
    # ------------------------------------------------------------------
    def restart(self) -> None:
        try:
            face = self.driver.find_element(By.ID, FACE_ID)
        except NoSuchElementException:
            raise CellLookupError(f"No {FACE_ID!r} element on the page.") from None
        face.click()

    def start_if_idle(self) -> bool:
        """Click the page's "start" marker if it shows one. Returns True if clicked."""
        starts: List[WebElement] = self.driver.find_elements(By.CLASS_NAME, START_CLASS)
        if not starts:
            return False
        starts[0].click()
        return True


def open_browser(config: OnlineConfig) -> WebDriver:
    """Start Chrome and load the game page."""
    options = Options()
    if config.headless:
        options.add_argument("--headless")
        options.add_argument("--disable-gpu")
        options.add_argument("--window-size=1920,1080")

    try:
        service = Service(ChromeDriverManager().install())
        driver = webdriver.Chrome(service=service, options=options)
    except WebDriverException:
        logger.exception("Could not start Chrome")
        raise

    logger.info("Opening %s", config.url)
    driver.get(config.url)
    return driver


def play_online(config: Optional[OnlineConfig] = None) -> None:
    """
    Play game after game on the live page until interrupted.

    Certain actions come from the deduction engine. When there are none the
    bot presses the page's start marker if shown, otherwise it reveals a
    random undecided cell. After a win or a loss it waits for Enter before
    restarting, so the operator can look at the board.
    """
    logging.basicConfig(level=LOG_LEVEL)
    config = config or OnlineConfig.from_env()
    driver = open_browser(config)
    board = OnlineBoard(driver, delay=config.delay)
    solver = LocalRuleSolver(mode=AnalysisMode.SNAPSHOT_AUTHORITATIVE, allow_guess=False)

    input("Press Enter once the game page is ready...")
    board.restart()

    try:
        while True:
            snapshot = board.snapshot()
            if snapshot.state.is_terminal:
                print(f"Game finished: {snapshot.state.name}")
                input("Press Enter to start a new game...")
                board.restart()
                continue

            actions = solver.next_actions(snapshot)
            if not actions and not board.start_if_idle():
                actions = solver.random_fallback(snapshot)

            for action in actions:
                board.apply(action)
    except KeyboardInterrupt:
        print("Stopped.")
    finally:
        driver.quit()
