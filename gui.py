# gui.py
import tkinter as tk
from tkinter import messagebox

from board import Board, CellState
from config import DEFAULT_GAME
from errors import CellLookupError, ConfigurationError
from solver.deduction import AnalysisMode
from solver.driver import LocalRuleSolver

CELL_SIZE = 28
BOARD_BORDER = 2
CANVAS_BG = "black"
CELL_CLOSED = "#b0b0b0"
CELL_OPEN = "#dcdcdc"
FLAG_GLYPH = "F"
MINE_GLYPH = "*"

NUMBER_COLORS = {
    1: "#0b24fb",
    2: "#0f7b0f",
    3: "#e00b0b",
    4: "#0b0b76",
    5: "#6e0909",
    6: "#0b7676",
    7: "#000000",
    8: "#4d4d4d",
}


class MinesweeperUI(tk.Tk):
    def __init__(self) -> None:
        super().__init__()
        self.title("Minesweeper Solver GUI")
        self.configure(bg="#1a1a1a")

        self.board: Board | None = None
        self.solver = LocalRuleSolver(mode=AnalysisMode.SELF_AUTHORITATIVE)

        self.width_var = tk.IntVar(value=DEFAULT_GAME.width)
        self.height_var = tk.IntVar(value=DEFAULT_GAME.height)
        self.mines_var = tk.IntVar(value=DEFAULT_GAME.mines)
        self.mines_left_var = tk.StringVar(value="Mines left: -")
        self.last_solver_message: str = ""
        self._game_over_shown = False

        self._build_controls()
        self._build_canvas()
        self.new_game()

    # UI setup
    def _build_controls(self) -> None:
        top = tk.Frame(self, bg="#1a1a1a")
        top.pack(side=tk.TOP, fill=tk.X, padx=8, pady=6)

        tk.Label(top, text="Width", fg="white", bg="#1a1a1a").pack(side=tk.LEFT)
        tk.Entry(top, width=4, textvariable=self.width_var).pack(side=tk.LEFT, padx=4)

        tk.Label(top, text="Height", fg="white", bg="#1a1a1a").pack(side=tk.LEFT)
        tk.Entry(top, width=4, textvariable=self.height_var).pack(side=tk.LEFT, padx=4)

        tk.Label(top, text="Mines", fg="white", bg="#1a1a1a").pack(side=tk.LEFT)
        tk.Entry(top, width=5, textvariable=self.mines_var).pack(side=tk.LEFT, padx=4)

        tk.Button(top, text="New Game", command=self.new_game).pack(side=tk.LEFT, padx=8)
        tk.Button(top, text="AI Step", command=self.ai_step).pack(side=tk.LEFT, padx=4)

        tk.Label(top, textvariable=self.mines_left_var, fg="white", bg="#1a1a1a").pack(
            side=tk.RIGHT, padx=4
        )

    def _build_canvas(self) -> None:
        self.canvas = tk.Canvas(self, bg=CANVAS_BG, highlightthickness=0)
        self.canvas.pack(side=tk.TOP, padx=8, pady=8)
        self.canvas.bind("<Button-1>", self.on_left_click)
        self.canvas.bind("<Button-3>", self.on_right_click)
        # Shift+Left for flag on mac/trackpads that lack right-click
        self.canvas.bind("<Shift-Button-1>", self.on_right_click)

    # Game lifecycle
    def new_game(self) -> None:
        try:
            board = Board(
                width=self.width_var.get(),
                height=self.height_var.get(),
                mine_count=self.mines_var.get(),
            )
        except (ConfigurationError, tk.TclError) as exc:
            messagebox.showerror("Invalid board", str(exc))
            return

        self.board = board
        self.last_solver_message = ""
        self._game_over_shown = False
        self._resize_canvas()
        self._refresh()

    def ai_step(self) -> None:
        """Run one solver pass, guessing only when nothing is certain."""
        if not self.board or self.board.game_over:
            return

        guesses_before = self.solver.guess_count
        actions = self.solver.play_step(self.board, self.board)
        if not actions:
            self.last_solver_message = "Solver is stuck"
        elif self.solver.guess_count > guesses_before:
            self.last_solver_message = "Guessed a random cell"
        else:
            self.last_solver_message = f"{len(actions)} certain action(s)"

        self._refresh()

    # Event handlers
    def on_left_click(self, event) -> None:
        self._handle_click(event, action="reveal")

    def on_right_click(self, event) -> None:
        self._handle_click(event, action="flag")

    def _handle_click(self, event, action: str) -> None:
        if not self.board or self.board.game_over:
            return
        x, y = self._coords_from_event(event)
        if x is None:
            return

        try:
            if action == "reveal":
                self.board.reveal_cell(x, y)
            else:
                self.board.toggle_flag(x, y)
        except CellLookupError:
            return

        self._refresh()

    def _refresh(self) -> None:
        self._update_mines_left()
        self.draw_board()
        self._maybe_show_game_over()

    def _maybe_show_game_over(self) -> None:
        if not self.board or not self.board.game_over or self._game_over_shown:
            return
        self._game_over_shown = True
        if self.board.win:
            messagebox.showinfo("Minesweeper", "All safe cells revealed. You win!")
        else:
            messagebox.showinfo("Minesweeper", "Boom! A mine was revealed.")

    # Drawing
    def _resize_canvas(self) -> None:
        if not self.board:
            return
        w = self.board.width * CELL_SIZE + BOARD_BORDER * 2
        h = self.board.height * CELL_SIZE + BOARD_BORDER * 2
        self.canvas.config(width=w, height=h)

    def draw_board(self) -> None:
        if not self.board:
            return

        self.canvas.delete("all")
        width, height = self.board.width, self.board.height
        show_mines = self.board.game_over

        w = width * CELL_SIZE + BOARD_BORDER * 2
        h = height * CELL_SIZE + BOARD_BORDER * 2
        self.canvas.create_rectangle(
            0, 0, w - 1, h - 1, outline="black", fill=CANVAS_BG, width=BOARD_BORDER
        )

        for cell in self.board.iter_cells():
            x0 = BOARD_BORDER + cell.x * CELL_SIZE
            y0 = BOARD_BORDER + cell.y * CELL_SIZE
            x1 = x0 + CELL_SIZE
            y1 = y0 + CELL_SIZE
            cx, cy = (x0 + x1) / 2, (y0 + y1) / 2

            fill = CELL_OPEN if cell.is_revealed else CELL_CLOSED
            self.canvas.create_rectangle(x0, y0, x1, y1, fill=fill, outline="#7a7a7a", width=1)

            if cell.state == CellState.FLAGGED:
                self.canvas.create_text(
                    cx, cy, text=FLAG_GLYPH, fill="#e00b0b", font=("Arial", 12, "bold")
                )
            elif cell.is_mine and (cell.is_revealed or show_mines):
                self.canvas.create_text(cx, cy, text=MINE_GLYPH, font=("Arial", 14, "bold"))
            elif cell.is_revealed and not cell.is_zero:
                num = cell.adjacent_mines
                self.canvas.create_text(
                    cx,
                    cy,
                    text=str(num),
                    fill=NUMBER_COLORS.get(num, "black"),
                    font=("Arial", 12, "bold"),
                )

        if self.last_solver_message:
            # Small overlay in the bottom-left corner describing the last AI step.
            self.canvas.create_text(
                BOARD_BORDER + 6,
                h - BOARD_BORDER - 6,
                text=self.last_solver_message,
                fill="white",
                anchor="sw",
                font=("Arial", 9, "bold"),
            )

    # Helpers
    def _coords_from_event(self, event) -> tuple[int | None, int | None]:
        if not self.board:
            return None, None
        x = (event.x - BOARD_BORDER) // CELL_SIZE
        y = (event.y - BOARD_BORDER) // CELL_SIZE
        if self.board.in_bounds(x, y):
            return int(x), int(y)
        return None, None

    def _update_mines_left(self) -> None:
        if not self.board:
            self.mines_left_var.set("Mines left: -")
            return
        self.mines_left_var.set(f"Mines left: {self.board.remaining_mines_estimate()}")


if __name__ == "__main__":
    app = MinesweeperUI()
    app.mainloop()
