"""Turn whatever a handler returned into a ``Response``.

One ``match`` statement; the first case that fits wins.
"""

import json
from typing import Any

from kida import Environment

from hostmux.errors import ConfigurationError
from hostmux.http.response import Redirect, Response
from hostmux.templating.integration import render_inline, render_template
from hostmux.templating.returns import InlineTemplate, Template


def negotiate(value: Any, *, kida_env: Environment | None = None) -> Response:
    """Map *value* onto a ``Response``.

    Strings are HTML, bytes are octet-stream, dicts and lists are JSON.
    ``(value, status)`` and ``(value, status, headers)`` tuples adjust the
    negotiated result. ``Template`` needs the app to have a
    ``template_dir``; ``InlineTemplate`` does not.
    """
    match value:
        case Response():
            return value
        case Redirect():
            return (
                Response(body="")
                .with_status(value.status)
                .with_header("Location", value.url)
                .with_headers(dict(value.headers))
            )
        case Template():
            if kida_env is None:
                msg = (
                    f"Cannot render {value.name!r}: this app has no template_dir. "
                    "Set AppConfig(template_dir=...) on the app or host engine."
                )
                raise ConfigurationError(msg)
            return Response(body=render_template(kida_env, value))
        case InlineTemplate():
            env = kida_env or Environment()
            return Response(body=render_inline(env, value))
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response(
                body=json.dumps(value, default=str),
                content_type="application/json; charset=utf-8",
            )
        case (inner, int() as status):
            return negotiate(inner, kida_env=kida_env).with_status(status)
        case (inner, int() as status, dict() as headers):
            return negotiate(inner, kida_env=kida_env).with_status(status).with_headers(headers)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                "Return str, dict, list, bytes, Template, Response, or Redirect."
            )
            raise TypeError(msg)
