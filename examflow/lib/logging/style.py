from pygments.style import Style
from pygments.token import Keyword, Name, Number, Punctuation, String


class LogStyle(Style):
    """Muted palette for the JSON trailer of a log line."""

    styles = {
        Name.Tag: "#5f87af",
        String: "#87af87",
        Number: "#d7875f",
        Keyword.Constant: "#af5fd7",
        Punctuation: "#6c6c6c",
    }
