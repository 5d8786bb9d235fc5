"""A `CodeSource` for the [Flask](https://flask.palletsprojects.com) framework."""

from __future__ import annotations

from flask import request


class FlaskRequestCodeSource:
    """Read the authorization code and `state` from the query of the current Flask request.

    This must be used while handling a request, typically in the view behind the `redirect_uri`.
    The Flask `session` can be used as store, so that each user of the app gets their own session:

    Example:
        ```python
        from flask import session

        @app.route("/callback")
        def callback():
            client = TokenExchangeClient(config, code_source=FlaskRequestCodeSource(), store=session)
            client.exchange(expected_state=session.pop("state", None))
            return redirect("/")
        ```

    Args:
        code_param: name of the query parameter containing the code
        state_param: name of the query parameter containing the state

    """

    def __init__(self, code_param: str = "code", state_param: str = "state") -> None:
        self.code_param = code_param
        self.state_param = state_param

    def get_code(self) -> str | None:
        return request.args.get(self.code_param) or None

    def get_state(self) -> str | None:
        return request.args.get(self.state_param)
