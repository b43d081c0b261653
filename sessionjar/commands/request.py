from __future__ import annotations

import json

from sessionjar.api.client import SessionClient
from sessionjar.api.models import SessionJarError
from sessionjar.config import Config
from sessionjar.output import output_json


def handle_request(args, client: SessionClient, config: Config) -> int:
    if not config.baseUrl and not args.path.startswith(("http://", "https://")):
        raise SessionJarError(
            message="No base URL configured",
            code="ConfigException",
            userMessage="Set the auth server URL first.\n"
                        "Run: sessionjar config set --base-url https://example.com/api/auth",
        )

    kwargs = {}
    if args.data is not None:
        try:
            kwargs["json"] = json.loads(args.data)
        except ValueError as exc:
            raise SessionJarError(
                message=f"Invalid JSON body: {exc}",
                code="InvalidArgument",
                path="--data",
            ) from exc

    resp = client.request(args.method.upper(), args.path, **kwargs)

    try:
        data = resp.json()
    except ValueError:
        data = None

    if data is not None:
        output_json(data)
    else:
        print(resp.text)
    return 0
