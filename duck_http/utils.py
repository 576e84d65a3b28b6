"""HTTP utilities: query construction and response-code classification.

See https://developer.mozilla.org/en-US/docs/Web/HTTP/Status
"""

from collections.abc import Mapping

from duck_http.models.response import HttpResponse, ResponseType

RESPONSE_TYPE_MESSAGES: dict[ResponseType, str] = {
    ResponseType.UNKNOWN: "Cannot find server - {url}",
    ResponseType.SUCCESS: "Request successful with code: {code} - {url}",
    ResponseType.ERROR: "The client encountered an error with code: {code} - {url}",
    ResponseType.SERVER_ERROR: "The server encountered an error and responded with code: {code} - {url}",
}

_custom_response_messages: dict[int, str] = {}


def construct_uri_with_parameters(uri: str, parameters: Mapping[str, str] | None) -> str:
    """Format and append parameters to a uri.

    Parameters are appended verbatim, in insertion order. Encode values
    beforehand if they contain reserved characters.

    Args:
        uri: The uri to append the parameters to.
        parameters: Parameters to append to the uri.

    Returns:
        The uri with the appended parameters.
    """
    if not parameters:
        return uri

    separator = "&" if "?" in uri else "?"
    query = "&".join(f"{key}={value}" for key, value in parameters.items())
    return f"{uri}{separator}{query}"


def set_custom_response_message(code: int, message: str) -> None:
    """Set a custom message for a response code.

    A custom message overrides the default message, and the code is then
    classified as ResponseType.CUSTOM.
    """
    _custom_response_messages[code] = message


def remove_custom_response_message(code: int) -> bool:
    """Remove a custom response message. Returns True if one was removed."""
    return _custom_response_messages.pop(code, None) is not None


def get_response_type(code: int) -> ResponseType:
    if code in _custom_response_messages:
        return ResponseType.CUSTOM
    if 200 <= code <= 206:
        return ResponseType.SUCCESS
    if 400 <= code <= 431:
        return ResponseType.ERROR
    if 500 <= code <= 511:
        return ResponseType.SERVER_ERROR
    return ResponseType.UNKNOWN


def get_response_type_message(code: int, url: str) -> str:
    if code in _custom_response_messages:
        return _custom_response_messages[code]
    template = RESPONSE_TYPE_MESSAGES.get(
        get_response_type(code), RESPONSE_TYPE_MESSAGES[ResponseType.UNKNOWN]
    )
    return template.format(code=code, url=url)


def get_response_message(response: HttpResponse) -> str:
    """Describe a response using its status code and url."""
    return get_response_type_message(response.status_code, response.url)
