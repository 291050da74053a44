# subdomainx

Building blocks for subdomain reconnaissance, written against the standard
library only. Python 3.10 or later is required.

## What is in the package

- `subdomainx.types` – the result records `SubdomainResult`, `LinkHeader`,
  `HTTPResult`, `Port`, `PortResult` and `ScanResults`. Each has `to_dict()`
  and a `from_dict()` class method, so they round-trip through JSON. Optional
  fields that are empty (IP lists, titles, technologies, a zero content
  length, service and version names) are left out of the dictionaries.
- `subdomainx.checkpoint` – `Checkpoint` and `ProgressState`, with
  `create_checkpoint`, `save_checkpoint`, `load_checkpoint`,
  `list_checkpoints` and `delete_checkpoint`. Failures raise
  `CheckpointError`.
- `subdomainx.scanner` – HTTP probing through the external `httpx` program
  and port scanning through the external `smap` program, the parsers for
  their JSON-lines output, result filters and `ScanOptions`.
- `subdomainx.tools` – the list of known enumeration tools and APIs
  (`get_required_tools`, `Tool`), availability checks and installation
  prompts.
- `subdomainx.validation` – `validate_input`, `validate_domain`,
  `validate_ip`, `validate_port` and `validate_url`, raising
  `ValidationError` (a `ValueError`).
- `subdomainx.retry` – `retry`, raising `RetryError` when every attempt fails.
- `subdomainx.concurrency` – `WorkerPool`, `Semaphore` and `RateLimiter`,
  built on threads.
- `subdomainx.progress` – `ProgressTracker` with a 30-character text bar and
  an ETA, plus module-level helpers for tracking enumeration progress.
- `subdomainx.resources` – `ResourceMonitor`, which reports memory traced by
  `tracemalloc`, CPU count, thread count and garbage collections.
- `subdomainx.fileutils` – `read_lines`, `write_lines`, `file_exists` and
  `ensure_directory`.
- `subdomainx.signals` – `SignalHandler`, which on SIGINT or SIGTERM marks
  the checkpoint as interrupted, saves it and exits with status 1.

## Validating input

```python
from subdomainx.validation import ValidationError, validate_domain, validate_port

validate_domain("sub.example.com")   # returns "sub.example.com"

try:
    validate_domain("example")
except ValidationError as exc:
    print(exc)   # domain must have at least one subdomain and TLD: example

validate_port(443)   # returns 443
```

`validate_ip` accepts IPv4 and IPv6 addresses. `validate_url` only checks that
the URL starts with `http://` or `https://`. `validate_input` checks a wildcard
file and optional wordlist exist, creates the output directory, and checks the
output format (`json`, `txt`, `html`, `zap`, `burp`, `nessus`, `csv`) and that
threads, timeout and rate limit are positive and retries not negative.

## Reading domain lists

```python
from subdomainx.fileutils import read_lines, write_lines

write_lines("out/domains.txt", ["example.com", "# a comment", "", "example.org"])
print(read_lines("out/domains.txt"))   # ['example.com', 'example.org']
```

`read_lines` strips whitespace and skips blank lines and lines starting with
`#`. `write_lines` creates missing parent directories.

## Retrying

```python
from subdomainx.retry import RetryError, retry

def lookup():
    ...

try:
    value = retry(lookup, 3, 10)
except RetryError as exc:
    print(exc)   # "after 3 retries: <last error>"
```

After the failure of attempt *i* (counting from 0) the call sleeps *i*²
seconds, capped at the timeout. With zero retries the function is never called
and `RetryError` is raised at once.

## Checkpoints

```python
from subdomainx.checkpoint import (
    create_checkpoint,
    list_checkpoints,
    load_checkpoint,
    save_checkpoint,
)
from subdomainx.types import SubdomainResult

cp = create_checkpoint("my_scan", "example.com", "", {"threads": 10})
cp.add_subdomains([SubdomainResult(subdomain="www.example.com", source="crtsh")])
cp.update_progress(1, 1)
save_checkpoint(cp, "output")           # writes output/my_scan_checkpoint.json

print(list_checkpoints("output"))        # ['my_scan']
restored = load_checkpoint("my_scan", "output")
```

`list_checkpoints` returns an empty list when the directory does not exist.

## HTTP and port scanning

```python
from subdomainx.scanner import ScanOptions, run_httpx, run_smap
from subdomainx.types import SubdomainResult

options = ScanOptions(max_http_targets=500, filters={"status_code": "200,301"})
subs = [SubdomainResult(subdomain="www.example.com", source="crtsh")]
http_results = run_httpx(options, subs)
port_results = run_smap(options, subs)
```

`run_httpx` builds an `http://` and an `https://` URL for each subdomain, up to
`max_http_targets` subdomains, and hands them to the scanner registered as
`httpx` – by default `HTTPXScanner`, which runs the `httpx` program.
`run_smap` passes each distinct host to the scanner registered as `smap`,
`SmapScanner` by default. If a program cannot be started or exits with an
error, `ScanError` is raised. Other scanners can be registered with
`register_scanner` and `register_port_scanner`.

`parse_httpx_output` and `parse_smap_output` turn the programs' JSON-lines
output into `HTTPResult` and `PortResult` lists, skipping lines that do not
parse. `should_include_http_result` and `should_include_port_result` apply the
`status_code` and `ports` filters (comma-separated numbers; an empty filter
keeps everything). `service_name` maps common ports to service names and
`extract_technologies` reads the `Server` and `X-Powered-By` headers.

## Tool status

```python
from subdomainx.tools import check_all_tools, display_tool_status, prompt_tool_installation

available, missing = check_all_tools()
display_tool_status()
prompt_tool_installation(missing)   # asks on standard input
```

Command-line tools are looked up on `PATH`. SecurityTrails and VirusTotal count
as available when `SECURITYTRAILS_API_KEY` or `VIRUSTOTAL_API_KEY` is set,
Censys when both `CENSYS_API_ID` and `CENSYS_SECRET` are set; linkheader,
crt.sh, URLScan, ThreatCrowd and HackerTarget are always available. When asked,
`prompt_tool_installation` runs the install commands that need neither `sudo`
nor a manual download.

## What the package does not do

There is no command-line program: nothing is installed to run from a shell,
and the messages printed by `display_tool_status` and `SignalHandler` that
mention command options refer to a front end that is not part of this
package. The package does not itself enumerate subdomains through the listed
tools and APIs, load configuration files, or write reports in the output
formats that `validate_input` accepts; it provides the types, checks, scanning
and checkpoint storage such a program is built from.

## Tests

The tests live in `tests/` and use pytest, available through the `test`
extra.