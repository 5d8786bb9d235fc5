"""This module contains helper classes for the Flask Framework.

See [Flask framework](https://flask.palletsprojects.com).

"""

from .code_source import FlaskRequestCodeSource

__all__ = ["FlaskRequestCodeSource"]
