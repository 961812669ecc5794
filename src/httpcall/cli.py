"""
httpcall command-line interface.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import sys
import time

import click
from rich.console import Console
from rich.markup import escape

from httpcall import __version__
from httpcall.body import resolve_body, select_body_source
from httpcall.builder import build_request, parse_headers
from httpcall.config import get_config
from httpcall.exceptions import InvalidInputError, InvalidRequestError, RenderError
from httpcall.executor import Executor
from httpcall.logging_config import configure_logging
from httpcall.models import BasicAuth, Failure, OutputFormat, RequestSpec
from httpcall.render import render
from httpcall.sink import save_body
from httpcall.trace import ConsoleTracer, Tracer


OUTPUT_CHOICES = [fmt.value for fmt in OutputFormat]


def _fail(console: Console, message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise SystemExit(1)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("target", required=False, metavar="[URL]")
@click.option("--url", help="URL to send the request to")
@click.option("-X", "--method", default="GET", help="HTTP method (GET, POST, PUT, DELETE, etc.)")
@click.option("-d", "--body", help="Raw request body")
@click.option("--body-file", type=click.Path(dir_okay=False), help="Read the request body from a file")
@click.option("--json", "json_fields", help="JSON body as 'key=value,key2=value2'")
@click.option("--form", "form_fields", help="Form body as 'key=value,key2=value2'")
@click.option("-H", "--headers", multiple=True, help="Headers as 'Name:Value,Name2:Value2'")
@click.option("--user", help="Basic auth username")
@click.option("--pass", "password", default="", help="Basic auth password")
@click.option("-t", "--timeout", type=int, help="Per-attempt timeout in seconds [default: 10]")
@click.option("--retries", type=int, help="Extra attempts after a failure [default: 0]")
@click.option("--retry-delay", type=int, help="Seconds between retries [default: 1]")
@click.option("--no-redirect", is_flag=True, help="Do not follow redirects")
@click.option("-o", "--output", type=click.Choice(OUTPUT_CHOICES), help="Output format [default: pretty]")
@click.option("--save", help="Save the raw response body to a file")
@click.option("-v", "--verbose", is_flag=True, help="Show the request before sending and timing after")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write logs to this file")
@click.version_option(__version__, prog_name="httpcall")
@click.pass_context
def main(ctx, target: str | None, url: str | None, method: str, body: str | None,
         body_file: str | None, json_fields: str | None, form_fields: str | None,
         headers: tuple, user: str | None, password: str, timeout: int | None,
         retries: int | None, retry_delay: int | None, no_redirect: bool,
         output: str | None, save: str | None, verbose: bool, no_color: bool,
         debug: bool, log_file: str | None):
    """Send a single HTTP request and show the response.

    Examples:
        httpcall https://api.example.com/users
        httpcall --url https://api.example.com/users -X POST --json "name=test,role=admin"
        httpcall https://api.example.com/data -H "X-API-Key:abc123" -o json
        httpcall https://api.example.com/auth --user alice --pass secret
        httpcall https://flaky.example.com --retries 3 --retry-delay 2 --save out.bin
    """
    config = get_config()
    configure_logging(debug=debug, log_file=log_file, level=config.log_level)

    err_console = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)
    options = ctx.obj or {}

    url = url or target
    if not url:
        _fail(err_console, "URL is required.")

    tracer = ConsoleTracer() if verbose else Tracer()

    try:
        spec = RequestSpec(
            url=url,
            method=method,
            headers=parse_headers(",".join(headers)),
            body=select_body_source(
                body=body,
                body_file=body_file,
                json_fields=json_fields,
                form_fields=form_fields,
            ),
            basic_auth=BasicAuth(user, password) if user else None,
            timeout=config.timeout if timeout is None else timeout,
            follow_redirects=not no_redirect,
            retries=config.retries if retries is None else retries,
            retry_delay=config.retry_delay if retry_delay is None else retry_delay,
            output=OutputFormat(output) if output else config.output,
            save_to=save,
            verbose=verbose,
        )
        resolved = resolve_body(spec.body, has_content_type=spec.has_content_type)
        request = build_request(spec, resolved, tracer=tracer)
    except (InvalidInputError, InvalidRequestError) as e:
        _fail(err_console, str(e))

    executor = Executor.from_spec(
        spec,
        transport=options.get("transport"),
        tracer=tracer,
        sleep=options.get("sleep", time.sleep),
    )
    outcome = executor.execute(request)

    if isinstance(outcome, Failure):
        _fail(err_console, f"{outcome.error} (after {outcome.attempts} attempt(s))")

    if spec.save_to:
        saved = save_body(spec.save_to, outcome.body)
        if not saved.success:
            err_console.print(f"[yellow]Warning:[/yellow] {escape(saved.error)}")

    use_color = not no_color and sys.stdout.isatty()
    try:
        text = render(outcome, spec.output, color=use_color)
    except RenderError as e:
        _fail(err_console, str(e))

    if isinstance(text, bytes):
        click.echo(text, nl=False)
    else:
        click.echo(text)


if __name__ == "__main__":
    main()
