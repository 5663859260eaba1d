"""CLI entry point for httpline.

Parses arguments, merges them over the optional config file, then runs the
request pipeline: build the request, send it, render the response.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import BinaryIO, TextIO

import httpx

from httpline.auth import PasswordPrompter, terminal_prompter
from httpline.body import StdinReader
from httpline.config_loader import load_client_config
from httpline.errors import HttplineError
from httpline.executor import Executor
from httpline.models import (
    BasicAuth,
    BodyKind,
    BodySpec,
    ClientConfig,
    ColorMode,
    FileBody,
    FormBody,
    InlineBody,
    Method,
    RedirectPolicy,
    RequestSpec,
    ShorthandAuth,
)
from httpline.renderer import ResponseRenderer
from httpline.request_builder import RequestBuilder


def _package_version() -> str:
    try:
        return version("httpline")
    except PackageNotFoundError:
        return "unknown"


def parse_method(value: str) -> Method:
    """Parse an HTTP method name, case-insensitively.

    Raises:
        argparse.ArgumentTypeError: If value is not a supported method.
    """
    try:
        return Method(value.upper())
    except ValueError:
        choices = ", ".join(m.value for m in Method)
        raise argparse.ArgumentTypeError(f"Invalid method '{value}'. Choose from: {choices}")


def positive_float(value: str) -> float:
    """Parse and validate a positive float value.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive number.
    """
    try:
        result = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number '{value}'.")
    if result <= 0:
        raise argparse.ArgumentTypeError(f"Value must be positive, got {result}.")
    return result


def non_negative_int(value: str) -> int:
    """Parse and validate a non-negative integer value.

    Raises:
        argparse.ArgumentTypeError: If value is not an integer >= 0.
    """
    try:
        result = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid integer '{value}'.")
    if result < 0:
        raise argparse.ArgumentTypeError(f"Value must not be negative, got {result}.")
    return result


@dataclass
class CliArgs:
    """Parsed command-line arguments.

    None means "not given on the command line" for options that the config
    file may also set.
    """

    url: str
    method: Method = Method.GET
    headers: list[str] = field(default_factory=list)
    cookies: list[str] = field(default_factory=list)
    query_params: list[str] = field(default_factory=list)
    no_follow: bool = False
    max_redirects: int | None = None
    print_headers: bool | None = None
    auth: str | None = None
    user: str | None = None
    bodies: list[str] = field(default_factory=list)
    input_path: str | None = None
    form_fields: list[str] = field(default_factory=list)
    json_body: bool = False
    url_encoded_body: bool = False
    verbose: bool = False
    color: ColorMode | None = None
    timeout: float | None = None
    insecure: bool = False
    config: Path | None = None


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="httpline",
        description="Send one HTTP request and print the response, pretty-printing JSON bodies.",
    )
    parser.add_argument("url", help="The URL to request")
    parser.add_argument(
        "-m", "--method",
        type=parse_method,
        default=Method.GET,
        metavar="METHOD",
        help="HTTP method: " + ", ".join(m.value for m in Method) + " (default: GET)",
    )
    parser.add_argument(
        "-H", "--header",
        action="append",
        default=[],
        dest="headers",
        metavar="NAME=VALUE",
        help="Add a header to the request (can be repeated)",
    )
    parser.add_argument(
        "-c", "--cookie",
        action="append",
        default=[],
        dest="cookies",
        metavar="NAME=VALUE",
        help="Add a cookie to the request (can be repeated)",
    )
    parser.add_argument(
        "-q", "--query",
        action="append",
        default=[],
        dest="query_params",
        metavar="KEY=VALUE",
        help="Add a query parameter to the URL (can be repeated)",
    )

    # Redirects and output
    parser.add_argument(
        "--no-follow",
        action="store_true",
        default=False,
        dest="no_follow",
        help="Do not follow redirects",
    )
    parser.add_argument(
        "--max-redirs",
        type=non_negative_int,
        default=None,
        dest="max_redirects",
        metavar="N",
        help="Maximum number of redirects to follow (default: 10)",
    )
    parser.add_argument(
        "--print-headers",
        action="store_true",
        default=None,
        dest="print_headers",
        help="Print response headers to stderr",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Print the outgoing request line and headers to stderr (credentials masked)",
    )
    parser.add_argument(
        "--color",
        choices=[m.value for m in ColorMode],
        default=None,
        help="Colorize output: auto (terminals only), always, never (default: auto)",
    )

    # Authentication (mutually exclusive)
    auth_group = parser.add_mutually_exclusive_group()
    auth_group.add_argument(
        "-a", "--auth",
        default=None,
        metavar="VALUE",
        help="Shorthand for the Authorization header, sent as given",
    )
    auth_group.add_argument(
        "--user",
        default=None,
        metavar="USER[:PASSWORD]",
        help="HTTP Basic authentication. If the password is omitted, you will be prompted for it",
    )

    # Body source (mutually exclusive)
    source_group = parser.add_mutually_exclusive_group()
    source_group.add_argument(
        "-b", "--body",
        action="append",
        default=[],
        dest="bodies",
        metavar="BODY",
        help="Add body contents; '@path' reads a file (can be repeated, concatenated in order)",
    )
    source_group.add_argument(
        "-i", "--input",
        default=None,
        dest="input_path",
        metavar="PATH",
        help="Read body contents from a file ('-' for stdin)",
    )
    source_group.add_argument(
        "-F", "--form-field",
        action="append",
        default=[],
        dest="form_fields",
        metavar="NAME=VALUE",
        help="Add a multipart form field (can be repeated); the transport sets the content type",
    )

    # Body kind (mutually exclusive)
    kind_group = parser.add_mutually_exclusive_group()
    kind_group.add_argument(
        "-j", "--json-body",
        action="store_true",
        default=False,
        dest="json_body",
        help="The body is JSON: sets content-type application/json and rejects malformed bodies",
    )
    kind_group.add_argument(
        "-u", "--url-encoded-body",
        action="store_true",
        default=False,
        dest="url_encoded_body",
        help="The body is URL encoded: sets content-type application/x-www-form-urlencoded "
        "and puts '&' before each body",
    )

    # Transport and config
    parser.add_argument(
        "--timeout",
        type=positive_float,
        default=None,
        metavar="SECONDS",
        help="Request timeout (default: the transport's default)",
    )
    parser.add_argument(
        "-k", "--insecure",
        action="store_true",
        default=False,
        help="Do not verify TLS certificates",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML config file (default: $HTTPLINE_CONFIG or ~/.config/httpline/config.yaml)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    return parser


def parse_args(args: list[str] | None = None) -> CliArgs:
    """Parse command-line arguments and return a CliArgs dataclass.

    Args:
        args: Command-line arguments to parse. If None, uses sys.argv[1:].

    Raises:
        SystemExit: If arguments are invalid (argparse behavior).
    """
    parser = build_parser()
    namespace = parser.parse_args(args)

    if namespace.form_fields and (namespace.json_body or namespace.url_encoded_body):
        parser.error("argument -F/--form-field: not allowed with -j/--json-body or -u/--url-encoded-body")

    return CliArgs(
        url=namespace.url,
        method=namespace.method,
        headers=namespace.headers,
        cookies=namespace.cookies,
        query_params=namespace.query_params,
        no_follow=namespace.no_follow,
        max_redirects=namespace.max_redirects,
        print_headers=namespace.print_headers,
        auth=namespace.auth,
        user=namespace.user,
        bodies=namespace.bodies,
        input_path=namespace.input_path,
        form_fields=namespace.form_fields,
        json_body=namespace.json_body,
        url_encoded_body=namespace.url_encoded_body,
        verbose=namespace.verbose,
        color=ColorMode(namespace.color) if namespace.color is not None else None,
        timeout=namespace.timeout,
        insecure=namespace.insecure,
        config=namespace.config,
    )


def _body_spec(args: CliArgs) -> BodySpec | None:
    if args.json_body:
        kind = BodyKind.JSON
    elif args.url_encoded_body:
        kind = BodyKind.URL_ENCODED
    else:
        kind = BodyKind.RAW

    if args.form_fields:
        return BodySpec(source=FormBody(fields=args.form_fields))
    if args.input_path is not None:
        return BodySpec(source=FileBody(path=args.input_path), body_kind=kind)
    if args.bodies:
        return BodySpec(source=InlineBody(fragments=args.bodies), body_kind=kind)
    return None


def build_request_spec(args: CliArgs, config: ClientConfig) -> RequestSpec:
    """Merge parsed arguments over config into a RequestSpec.

    Config headers are not included here; the request builder applies them
    ahead of the RequestSpec headers.
    """
    auth = None
    if args.auth is not None:
        auth = ShorthandAuth(value=args.auth)
    elif args.user is not None:
        auth = BasicAuth.from_user_arg(args.user)

    follow = config.follow_redirects and not args.no_follow
    max_redirects = args.max_redirects if args.max_redirects is not None else config.max_redirects

    return RequestSpec(
        url=args.url,
        method=args.method,
        headers=args.headers,
        query_params=args.query_params,
        cookies=args.cookies,
        auth=auth,
        body=_body_spec(args),
        redirects=RedirectPolicy(follow=follow, max_redirects=max_redirects),
    )


def run(
    args: CliArgs,
    prompter: PasswordPrompter = terminal_prompter,
    stdin: BinaryIO | None = None,
    out: TextIO | None = None,
    err: TextIO | None = None,
    transport: httpx.BaseTransport | None = None,
) -> int:
    """Run one request/response cycle.

    Raises:
        HttplineError: On the first failure; nothing is retried.
    """
    config = load_client_config(args.config)
    spec = build_request_spec(args, config)

    print_headers = args.print_headers if args.print_headers is not None else config.print_headers
    color = args.color if args.color is not None else config.color
    renderer = ResponseRenderer(print_headers=print_headers, color=color, out=out, err=err)

    if args.no_follow and args.max_redirects is not None:
        renderer.render_warning("--max-redirs is ignored with --no-follow")

    builder = RequestBuilder(
        prompter=prompter,
        stdin=StdinReader(stdin),
        default_headers=config.headers,
    )
    timeout = args.timeout if args.timeout is not None else config.timeout
    verify_ssl = config.verify_ssl and not args.insecure

    with Executor(spec.redirects, timeout=timeout, verify_ssl=verify_ssl, transport=transport) as executor:
        request = builder.build(spec, executor.client)
        if args.verbose:
            renderer.render_request(request)
        response = executor.send(request)

    renderer.render(response)
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)
    try:
        return run(parsed)
    except HttplineError as e:
        ResponseRenderer(color=parsed.color or ColorMode.AUTO).render_error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
