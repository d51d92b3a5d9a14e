import json as jsonlib
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from bodynorm import (  # noqa: E402
    BodyError,
    RecordingLogger,
    Request,
    encode_multipart,
    error_body,
    process_request,
    set_logger,
    status_for_error,
    user_context,
)


def main() -> None:
    logger = RecordingLogger()
    set_logger(logger)

    res = process_request(
        Request(headers={"Content-Type": "application/json"}, query={"q": ["test"]}, body='[{"b": 1, "a": 2}]')
    )
    assert res.body == b'[{"a":2,"b":1}]'
    assert user_context(res.scope).get("q") == "test"

    res = process_request(
        Request(headers={"content-type": "application/x-www-form-urlencoded"}, body="tag=a&tag=b&name=John")
    )
    assert jsonlib.loads(res.body) == {"tag": ["a", "b"], "name": "John"}
    assert res.context.get("tag") == "a"

    content_type, body = encode_multipart([("name", "John"), ("age", "30")])
    res = process_request(Request(headers={"content-type": content_type}, body=body))
    assert jsonlib.loads(res.body) == {"name": "John", "age": "30"}

    res = process_request(Request(headers={"content-type": "text/plain"}, body="Hello World"))
    assert res.body == b'"Hello World"'

    res = process_request(Request(headers={"content-type": "application/xml"}, body="<xml></xml>"))
    assert res.body == b"<xml></xml>"

    try:
        process_request(Request(headers={"content-type": "application/json"}, body='[{"ok": 1}, 2]'))
    except BodyError as exc:
        assert status_for_error(exc) == 400
        assert jsonlib.loads(error_body(exc))["error"]["message"] == "invalid JSON array item at index 1"
    else:
        raise AssertionError("expected a BodyError")

    assert logger.messages() == [
        "request body decoded",
        "request body decoded",
        "request body decoded",
        "request body decoded",
        "request body passed through",
        "request body rejected",
    ]

    print("examples/normalize_demo.py: PASS")


if __name__ == "__main__":
    main()
