import logging
import sys

from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.text import Text

_LEVEL_STYLES = {
    logging.DEBUG: "dim",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "bold white on red",
}


class StyledStandardHandler(RichHandler):
    """
    rich 终端处理器.

    不显示时间/级别/路径列, 改为按级别给消息着色;
    WARNING 以下写入 stdout, 其余写入 stderr.
    """

    def __init__(self) -> None:
        super().__init__(
            show_time=False,
            show_level=False,
            show_path=False,
            markup=False,
            rich_tracebacks=False,
        )

    def emit(self, record: logging.LogRecord) -> None:
        self.console.file = sys.stdout if record.levelno < logging.WARNING else sys.stderr
        super().emit(record)

    def render_message(
        self, record: logging.LogRecord, message: str
    ) -> ConsoleRenderable:
        text = super().render_message(record, message)
        style = _LEVEL_STYLES.get(record.levelno)
        if style and isinstance(text, Text):
            text.stylize(style)
        return text
