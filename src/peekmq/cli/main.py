"""
peekmq.cli.main
~~~~~~~~~~~~~~~

Command line interface for PeekMQ package.
"""

import argparse
import json
import logging
import sys
from typing import Any, BinaryIO, Dict, List, Optional

from peekmq import __version__
from peekmq.adapter import table_from_python
from peekmq.config import CURRENT_CONFIG, configure
from peekmq.exceptions import ComposeError
from peekmq.output import compose
from peekmq.structures import DeliveryEnvelope, PropertySet

log = logging.getLogger("peekmq")

vInfoStr = f"PeekMQ {__version__}"


def list_cfg_vars(print_values: bool) -> None:
    print("PeekMQ configuration variables:\n")
    for cfg_var in CURRENT_CONFIG:
        print(cfg_var, end="")
        if print_values:
            print(f"={json.dumps(CURRENT_CONFIG.get(cfg_var))}", end="")
        print("")
    print()


def _read_body(body_file: Optional[str]) -> bytes:
    if body_file is None or body_file == "-":
        return sys.stdin.buffer.read()
    with open(body_file, "rb") as in_file:
        return in_file.read()


def json_object(headers: Optional[str]) -> Optional[Dict[str, Any]]:
    if headers is None:
        return None
    parsed = json.loads(headers)
    if not isinstance(parsed, dict):
        raise ValueError("headers must be a JSON object")
    return table_from_python(parsed)


def delivery_tag(value: str) -> int:
    tag = int(value)
    if not 0 <= tag < 2**64:
        raise ValueError
    return tag


def cmdln_render(args: argparse.Namespace, out: BinaryIO) -> int:
    content_type = args.content_type
    if content_type is None:
        content_type = configure("DEFAULT_CONTENT_TYPE") or None

    envelope = DeliveryEnvelope(
        consumer_tag=args.consumer_tag,
        delivery_tag=args.delivery_tag,
        redelivered=args.redelivered,
        exchange=args.exchange,
        routing_key=args.routing_key,
    )
    props = PropertySet(content_type=content_type, headers=args.headers)
    try:
        body = _read_body(args.file)
    except OSError as e:
        log.error(f"Could not read message body: {e}")
        return 1
    log.info(f"Rendering {len(body)} byte(s) of '{content_type or ''}'")

    try:
        output = compose(
            args.info or configure("INFO_MODE"),
            envelope,
            props,
            body,
            indent=configure("JSON_INDENT"),
            max_depth=configure("MAX_TABLE_DEPTH"),
        )
    except ComposeError as e:
        log.error(f"Could not render message: {e}")
        return 1

    out.write(output)
    out.flush()
    return 0


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        prog="peekmq", description="Render AMQP messages from the command line"
    )
    parser.add_argument(
        "-V", "--version", action="store_true", help="print the version of PeekMQ package"
    )
    parser.add_argument(
        "-v", "--verbose", default=0, action="count", help="specify verbosity of script"
    )

    subparsers = parser.add_subparsers(dest="cmd")
    render_parser = subparsers.add_parser(
        "render",
        description="Render a message body and its delivery information",
        help="render a message",
    )
    vConfig_parser = subparsers.add_parser(
        "set",
        description="set PeekMQ configuration variables in the user configuration file",
        help="sets a configuration variable. Note this variable is set permanently for all future runs of PeekMQ.",
    )
    vLister_parser = subparsers.add_parser(
        "list",
        description="list all configuration variables",
        help="list all configuration variables",
    )

    render_parser.add_argument(
        "file",
        nargs="?",
        help="file holding the message body, read from stdin if missing or '-'.",
    )
    render_parser.add_argument(
        "-i",
        "--info",
        action="store_true",
        help="render the delivery, properties and body as a JSON document.",
    )
    render_parser.add_argument(
        "-t", "--content-type", help="content type of the body."
    )
    render_parser.add_argument(
        "-H",
        "--headers",
        type=json_object,
        help="message headers as a JSON object.",
    )
    render_parser.add_argument(
        "-e",
        "--exchange",
        default="",
        help="exchange the message was delivered from, default is '%(default)s'.",
    )
    render_parser.add_argument(
        "-k",
        "--routing-key",
        default="",
        help="routing key of the message, default is '%(default)s'.",
    )
    render_parser.add_argument(
        "-c",
        "--consumer-tag",
        default="",
        help="consumer tag of the delivery, default is '%(default)s'.",
    )
    render_parser.add_argument(
        "-d",
        "--delivery-tag",
        type=delivery_tag,
        default=0,
        help="delivery tag of the delivery, default is %(default)s.",
    )
    render_parser.add_argument(
        "-r",
        "--redelivered",
        action="store_true",
        help="mark the delivery as redelivered.",
    )

    vConfig_parser.add_argument(
        "variable", help="name of configuration variable to set"
    )
    vConfig_parser.add_argument(
        "value",
        nargs="?",
        help="the value to set the variable to, leave blank to reset to default",
    )

    vLister_parser.add_argument(
        "--values",
        action="store_true",
        help="list current values of configuration variables as well",
    )

    args = parser.parse_args(args=argv)

    levels = [logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG]
    ch = logging.StreamHandler()
    ch.setFormatter(logging.Formatter("[%(levelname)s] - %(message)s"))
    log.addHandler(ch)
    log.setLevel(levels[min(3, args.verbose)])

    try:
        sub_command = getattr(args, "cmd")
        if sub_command == "render":
            return cmdln_render(args, sys.stdout.buffer)
        elif sub_command == "set":
            var = getattr(args, "variable")
            val = getattr(args, "value")
            configure(var, val, durable=True)
            print(
                f"variable '{var.upper()}' set to '{configure(var)}' in config file at '{CURRENT_CONFIG.path}'"
            )
        elif sub_command == "list":
            list_cfg_vars(getattr(args, "values"))
        else:
            if getattr(args, "version"):
                print(vInfoStr)
            else:
                parser.print_usage()
        return 0
    finally:
        log.removeHandler(ch)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
