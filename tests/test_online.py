# tests/test_online.py
"""OnlineBoard against a fake WebDriver; no browser is started."""

import pytest
from selenium.common.exceptions import NoSuchElementException
from selenium.webdriver.common.by import By

import online
from errors import CellLookupError
from online import OnlineBoard, parse_cell
from solver.deduction import AnalysisMode, certain_actions
from solver.utils import Action, GameState


class FakeElement:
    def __init__(self, attrs):
        self.attrs = attrs
        self.clicks = 0

    def get_attribute(self, name):
        return self.attrs.get(name)

    def click(self):
        self.clicks += 1


class FakeDriver:
    def __init__(self, rows, face=""):
        self.cells = {}
        self.order = []
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                classes = ["cell"]
                if ch == "F":
                    classes += ["hd_closed", "hd_flag"]
                elif ch == ".":
                    classes += ["hd_closed"]
                else:
                    classes += ["hd_opened", f"hd_type{ch}"]
                element = FakeElement(
                    {
                        "id": f"cell_{x}_{y}",
                        "data-x": str(x),
                        "data-y": str(y),
                        "class": " ".join(classes),
                    }
                )
                self.cells[(x, y)] = element
                self.order.append(element)
        self.face = face
        self.start = []
        self.extra = {}

    def find_elements(self, by, value):
        assert by == By.CLASS_NAME
        if value == "cell":
            return list(self.order)
        if value == "start":
            return self.start
        return [object()] if value == self.face else []

    def find_element(self, by, value):
        assert by == By.ID
        if value in self.extra:
            return self.extra[value]
        try:
            _, x, y = value.split("_")
            return self.cells[(int(x), int(y))]
        except (KeyError, ValueError):
            raise NoSuchElementException(value)


class FakeActionChains:
    performed = []

    def __init__(self, driver):
        self.driver = driver
        self.target = None

    def context_click(self, element):
        self.target = element
        return self

    def perform(self):
        FakeActionChains.performed.append(self.target)


@pytest.fixture(autouse=True)
def fake_action_chains(monkeypatch):
    FakeActionChains.performed = []
    monkeypatch.setattr(online, "ActionChains", FakeActionChains)
    return FakeActionChains


def test_parse_cell_reads_coordinates_and_classes():
    opened = FakeElement({"data-x": "3", "data-y": "1", "class": "cell hd_opened hd_type2"})
    flagged = FakeElement({"data-x": "0", "data-y": "0", "class": "cell hd_closed hd_flag"})

    cell = parse_cell(opened)
    assert (cell.x, cell.y, cell.discovered, cell.flagged, cell.count) == (3, 1, True, False, 2)

    cell = parse_cell(flagged)
    assert (cell.discovered, cell.flagged, cell.count) == (False, True, None)


def test_parse_cell_without_coordinates_is_a_lookup_failure():
    with pytest.raises(CellLookupError):
        parse_cell(FakeElement({"id": "cell_?", "class": "cell"}))


def test_snapshot_from_page():
    driver = FakeDriver(["1F.", "..."])
    board = OnlineBoard(driver, delay=0)

    snapshot = board.snapshot()

    assert (snapshot.width, snapshot.height) == (3, 2)
    assert snapshot.state == GameState.RUNNING
    assert snapshot.cell_at(0, 0).count == 1
    assert snapshot.cell_at(1, 0).flagged
    assert certain_actions(snapshot, AnalysisMode.SNAPSHOT_AUTHORITATIVE) == [
        Action("reveal", 0, 1),
        Action("reveal", 1, 1),
    ]


@pytest.mark.parametrize(
    "face,state",
    [
        ("hd_top-area-face-win", GameState.WON),
        ("hd_top-area-face-lose", GameState.LOST),
        ("", GameState.RUNNING),
    ],
)
def test_state_from_face(face, state):
    board = OnlineBoard(FakeDriver(["0"], face=face))

    assert board.state() == state
    assert board.snapshot().state == state


def test_reveal_is_a_left_click(monkeypatch):
    monkeypatch.setattr(online.time, "sleep", lambda _: None)
    driver = FakeDriver(["1.", ".."])
    board = OnlineBoard(driver)

    board.apply(Action("reveal", 1, 1))

    assert driver.cells[(1, 1)].clicks == 1
    assert FakeActionChains.performed == []


def test_flag_is_a_context_click():
    driver = FakeDriver(["1.", ".."])
    board = OnlineBoard(driver, delay=0)

    board.apply(Action("flag", 1, 0))

    assert FakeActionChains.performed == [driver.cells[(1, 0)]]
    assert driver.cells[(1, 0)].clicks == 0


def test_missing_cell_element_is_a_lookup_failure():
    board = OnlineBoard(FakeDriver(["1."]), delay=0)

    with pytest.raises(CellLookupError):
        board.apply(Action("reveal", 4, 4))


def test_start_if_idle():
    driver = FakeDriver(["."])
    board = OnlineBoard(driver, delay=0)
    assert board.start_if_idle() is False

    marker = FakeElement({})
    driver.start = [marker]
    assert board.start_if_idle() is True
    assert marker.clicks == 1


def test_restart_clicks_the_face():
    driver = FakeDriver(["1."])
    face = FakeElement({"id": online.FACE_ID})
    driver.extra[online.FACE_ID] = face
    board = OnlineBoard(driver, delay=0)

    board.restart()

    assert face.clicks == 1


def test_restart_without_face_is_a_lookup_failure():
    board = OnlineBoard(FakeDriver(["1."]), delay=0)

    with pytest.raises(CellLookupError):
        board.restart()
