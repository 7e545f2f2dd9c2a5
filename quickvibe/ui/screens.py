"""Modal screens for the quickvibe TUI."""

from typing import List, Optional, Tuple

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, OptionList, Static
from textual.widgets.option_list import Option

from quickvibe.constants import NEW_SESSION_LABEL
from quickvibe.formatters import format_session
from quickvibe.models.issue import Issue
from quickvibe.models.session import TmuxSession

DIALOG_CSS = """
    #dialog {
        width: 80%;
        height: auto;
        max-height: 80%;
        border: thick $background 80%;
        background: $surface;
        padding: 1 2;
    }

    #message {
        width: 100%;
        height: auto;
        padding: 1 0;
    }

    #button-container {
        width: 100%;
        height: auto;
        align: center middle;
        padding: 1 0;
    }

    Button {
        margin: 0 1;
    }
"""

# Session screen results
ATTACH = "attach"
NEW = "new"
KILL = "kill"


class ConfirmScreen(ModalScreen[bool]):
    """Modal confirmation dialog."""

    DEFAULT_CSS = "ConfirmScreen { align: center middle; }" + DIALOG_CSS

    BINDINGS = [
        Binding("y", "answer(True)", "Yes", show=False),
        Binding("n,escape", "answer(False)", "No", show=False),
    ]

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static(self.message, id="message")
            with Container(id="button-container"):
                yield Button("Yes", variant="error", id="yes")
                yield Button("No", variant="primary", id="no")

    def action_answer(self, answer: bool) -> None:
        self.dismiss(answer)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button press."""
        self.dismiss(event.button.id == "yes")


class InfoScreen(ModalScreen):
    """Modal info display dialog for errors, legend and configuration."""

    DEFAULT_CSS = "InfoScreen { align: center middle; }" + DIALOG_CSS

    BINDINGS = [Binding("escape,enter,q", "close", "Close", show=False)]

    def __init__(self, info: str):
        super().__init__()
        self.info = info

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static(self.info, id="message", markup=False)
            with Container(id="button-container"):
                yield Button("Close", variant="primary", id="close")

    def action_close(self) -> None:
        self.dismiss()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss()


class InputScreen(ModalScreen[Optional[str]]):
    """Ask for a single line of text; dismisses with None on escape."""

    DEFAULT_CSS = "InputScreen { align: center middle; }" + DIALOG_CSS

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, prompt: str, placeholder: str = "", value: str = ""):
        super().__init__()
        self.prompt = prompt
        self.placeholder = placeholder
        self.value = value

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static(self.prompt, id="message")
            yield Input(value=self.value, placeholder=self.placeholder, max_length=50, id="input")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        value = event.value.strip()
        if value:
            self.dismiss(value)

    def action_cancel(self) -> None:
        self.dismiss(None)


class SessionScreen(ModalScreen[Optional[Tuple[str, Optional[str]]]]):
    """Pick a tmux session of a container, or create a new one.

    Dismisses with (ATTACH, name), (NEW, None), (KILL, name) or None.
    """

    DEFAULT_CSS = "SessionScreen { align: center middle; }" + DIALOG_CSS

    BINDINGS = [
        Binding("escape,q", "cancel", "Back"),
        Binding("k", "kill", "Kill session"),
    ]

    def __init__(self, title: str, sessions: List[TmuxSession]):
        super().__init__()
        self.title_text = title
        self.sessions = sessions

    def compose(self) -> ComposeResult:
        options = [Option(format_session(s), id=s.name) for s in self.sessions]
        options.append(Option(NEW_SESSION_LABEL, id=None))
        with Vertical(id="dialog"):
            yield Static(f"Select tmux session in {self.title_text}", id="message")
            yield OptionList(*options, id="sessions")

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_index < len(self.sessions):
            self.dismiss((ATTACH, self.sessions[event.option_index].name))
        else:
            self.dismiss((NEW, None))

    def action_kill(self) -> None:
        index = self.query_one(OptionList).highlighted
        if index is not None and index < len(self.sessions):
            self.dismiss((KILL, self.sessions[index].name))

    def action_cancel(self) -> None:
        self.dismiss(None)


class IssueScreen(ModalScreen[Optional[Issue]]):
    """Pick a GitHub issue to start a worktree from."""

    DEFAULT_CSS = "IssueScreen { align: center middle; }" + DIALOG_CSS

    BINDINGS = [Binding("escape,q", "cancel", "Back")]

    def __init__(self, repo_name: str, issues: List[Issue]):
        super().__init__()
        self.repo_name = repo_name
        self.issues = issues

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static(f"Create worktree for an issue of {self.repo_name}", id="message")
            yield OptionList(*[Option(str(issue)) for issue in self.issues], id="issues")

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(self.issues[event.option_index])

    def action_cancel(self) -> None:
        self.dismiss(None)
