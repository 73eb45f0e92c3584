"""Documentation metadata shared by ``--help`` and the generated man page."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from mdns_discover.errors import ExitCode
from mdns_discover.service import OutputField

PROJECT_URL = "https://github.com/bbusse/mdns-discover"


@dataclass(frozen=True)
class FlagInfo:
    name: str               # without leading dashes
    value_syntax: str       # "=text|json", "<n>", ...
    default: str
    env: str
    description: str


@dataclass(frozen=True)
class EnvInfo:
    name: str
    description: str


@dataclass(frozen=True)
class Example:
    command: str
    description: str


FLAGS: tuple[FlagInfo, ...] = (
    FlagInfo("output", "=text|json", "text", "", "Output format"),
    FlagInfo("timeout", "=30s", "15s", "MDNS_TIMEOUT", "Discovery timeout"),
    FlagInfo("concurrency", "<n>", "10", "MDNS_CONCURRENCY", "Simultaneous lookups"),
    FlagInfo("debug", "", "false", "MDNS_DEBUG", "Verbose debug output"),
    FlagInfo("summary", "", "false", "", "Print summary (show all service types with counts)"),
    FlagInfo("no-color", "", "false", "", "Disable ANSI color in summary"),
)

ENVIRONMENT: tuple[EnvInfo, ...] = (
    EnvInfo("MDNS_SERVICE_FILTER", "Restrict to a single service type"),
    EnvInfo("MDNS_FIELD_FILTER", "Comma list of fields (overridden by show-fields)"),
    EnvInfo("MDNS_TIMEOUT", "Discovery timeout (duration string)"),
    EnvInfo("MDNS_DEBUG", "Verbose debug output (1 / true)"),
    EnvInfo("MDNS_CONCURRENCY", "Max concurrent service lookups"),
    EnvInfo("MDNS_RESOLVER", "Resolver backend (default: zeroconf)"),
)

EXAMPLES: tuple[Example, ...] = (
    Example("mdns-discover", "Discover using defaults"),
    Example("mdns-discover --output=json", "JSON array output"),
    Example('MDNS_SERVICE_FILTER="_workstation._tcp" mdns-discover', "Filter to a specific service"),
    Example('mdns-discover show-fields "hostname,address,port"', "Limit output columns"),
    Example("MDNS_TIMEOUT=30s mdns-discover --concurrency=5", "Override timeout and concurrency"),
)

EXIT_CODES: dict[ExitCode, str] = {
    ExitCode.OK: "Success",
    ExitCode.ERROR: "Runtime error",
    ExitCode.USAGE: "Usage error",
    ExitCode.RESOLVER_INIT: "Resolver initialization failed",
    ExitCode.BROWSE_FAILED: "Browse operation failed",
    ExitCode.TIMEOUT_ZERO: "Timed out with zero results",
}


def allowed_fields() -> list[str]:
    return sorted(f.value for f in OutputField)


def _example_command(command: str, prog: str) -> str:
    if command == "mdns-discover":
        return prog
    if command.startswith("mdns-discover "):
        return prog + " " + command[len("mdns-discover "):]
    return command


def help_text(prog: str, version: str) -> str:
    lines = [
        f"{prog} v{version} - mDNS service discovery utility",
        f"Usage: {prog} [flags] [subcommand]",
        "",
        "Commands:",
        "  help                  Show this help text",
        "  man                   Output man page (mdoc) and exit",
        '  show-fields "a,b,c"   Limit output to specified comma-separated fields',
        "",
        "Flags:",
    ]
    for f in sorted(FLAGS, key=lambda f: f.name):
        syntax = "--" + f.name + f.value_syntax
        default = f" (default: {f.default})" if f.default else ""
        env = f" (env: {f.env})" if f.env else ""
        lines.append(f"  {syntax:<20} {f.description}{default}{env}")
    lines += ["", "Environment:"]
    for e in sorted(ENVIRONMENT, key=lambda e: e.name):
        lines.append(f"  {e.name:<22} {e.description}")
    lines += [
        "",
        "Fields:",
        f"  Allowed: {', '.join(allowed_fields())}",
        "  Unknown field names are ignored",
        "",
        "Output modes:",
        "  text  One line per discovered (service + address).",
        "  json  Single JSON array (all results).",
        "",
        "Examples:",
    ]
    for ex in EXAMPLES:
        lines.append(f"  {_example_command(ex.command, prog):<45} {ex.description}")
    lines += ["", "Exit codes:"]
    for code, meaning in sorted(EXIT_CODES.items()):
        lines.append(f"  {int(code):<3d} {meaning}")
    lines.append("")
    return "\n".join(lines) + "\n"


def man_page(prog: str, version: str, date: dt.date | None = None) -> str:
    """mdoc(7) source for ``prog(1)``."""
    date = date or dt.date.today()
    out = [
        f".Dd {date.isoformat()}",
        f".Dt {prog.upper()} 1",
        ".Os mdns-discover",
        ".Sh NAME",
        f"{prog} - mDNS service discovery utility",
        ".Sh SYNOPSIS",
        f".Nm {prog}",
        ".Op Fl -output Ns =text|json",
        ".Op Fl -timeout Ns =30s",
        ".Op Fl -concurrency Ar n",
        ".Op Fl -debug",
        ".Op Fl h | Fl -help | Fl -man",
        ".Op Ar subcommand",
        ".Sh DESCRIPTION",
        ".Nm performs multicast DNS (mDNS / DNS-SD) discovery across a curated list "
        "of service types or an optionally restricted single service. Results can be "
        "emitted as plain text lines or a JSON array.",
        ".Sh FLAGS",
    ]
    for f in sorted(FLAGS, key=lambda f: f.name):
        parts = [f.description]
        if f.default:
            parts.append("default: " + f.default)
        if f.env:
            parts.append("env: " + f.env)
        out += [f".It Fl --{f.name}{f.value_syntax}", "; ".join(parts)]
    out.append(".Sh ENVIRONMENT")
    for e in sorted(ENVIRONMENT, key=lambda e: e.name):
        out += [f".It Ev {e.name}", e.description]
    out += [
        ".Sh FIELDS",
        f"Allowed output fields: {', '.join(allowed_fields())}. Unknown names are ignored.",
        ".Sh OUTPUT MODES",
        "text: One line per discovered service instance (fields space-separated).",
        "json: Single JSON array containing all discovered services.",
        ".Sh EXAMPLES",
    ]
    for ex in EXAMPLES:
        out += [".It ", _example_command(ex.command, prog), ex.description]
    out.append(".Sh EXIT STATUS")
    for code, meaning in sorted(EXIT_CODES.items()):
        out.append(f".It {int(code)} {meaning}")
    out += [
        ".Sh VERSION",
        version,
        ".Sh SOURCE",
        f"Project page: {PROJECT_URL}",
        ".Sh SEE ALSO",
        "multicast DNS (mDNS), DNS-SD specifications",
    ]
    return "\n".join(out) + "\n"
