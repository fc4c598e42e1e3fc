# cellguard

Building blocks for a lightweight container runtime that isolates a process
by redirecting its file paths and network calls rather than relying on kernel
namespaces. The package holds the on-disk stores and the decision logic; it
has no dependencies beyond the standard library.

## Modules

- `cellguard.container` – `ContainerStore` keeps each container's `state.json`
  and an empty `rootfs/` under `<root>/containers/<id>/` (the root defaults to
  `~/.cell`). `create(image)` makes a container with a 12-character id,
  `get(id)` accepts a full id or a unique prefix (raising `KeyError` when
  nothing matches and `ValueError` when the prefix is ambiguous), and
  `update`, `list` (oldest first) and `remove` do what their names say.
  `ContainerState` and `ContainerStatus` (`created`, `running`, `stopped`)
  describe a container; `to_dict` / `from_dict` convert to and from JSON data.
- `cellguard.manifest` – `ImageStore` saves image manifests (JSON-compatible
  mappings with a `name`) as `<root>/<name>/manifest.json`, with `save`,
  `load`, `list` (sorted names) and `remove`. Missing images raise `KeyError`.
- `cellguard.syscall` – `RewriteRules` decides which absolute paths are
  redirected into a container's root filesystem, which `/proc/self` (or
  `/proc/<pid>`) entries are served from it, whether a port may be connected
  to or bound, whether a write to a host file calls for copy-on-write, and
  which `NatRule` applies to an outbound connection.
- `cellguard.rootfs` – `prepare_rootfs(layers, target)` copies layer
  directories into a root filesystem in order, later layers overwriting
  earlier ones, then creates `proc`, `sys`, `dev`, `tmp`, `etc`, `var` and
  `run` if missing.
- `cellguard.ntpath` – `NtPathRewriter.should_rewrite` maps Windows NT paths
  (`\??\C:\...`) into the rootfs or into a volume mount, skipping system
  locations, executables and paths whose top directory the rootfs lacks.
- `cellguard.ntintercept` – `parse_winsock_addr` decodes an IPv4 or IPv6
  `sockaddr` into a `NetAccess` (blocked when its port is outside the allowed
  set), `mapped_bind_port` resolves `(host_port, container_port)` mappings,
  and `AccessLog` records `FileAccess` and `NetAccess` entries and renders a
  summary with `summary_lines()`.

## What it does not do

The package decides and records; it does not act on a running process. It
does not start, trace or stop processes, does not install syscall filters,
does not apply memory or process-count limits, and does not store image
layer contents. There is no command-line command.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from pathlib import Path

from cellguard.container import ContainerStatus, ContainerStore
from cellguard.manifest import ImageStore
from cellguard.syscall import NatRule, RewriteRules

images = ImageStore(Path("/tmp/cell/images"))
images.save({"name": "myimage", "layers": []})
print(images.list())                      # ['myimage']

containers = ContainerStore(Path("/tmp/cell"))
state = containers.create("myimage")
state.status = ContainerStatus.RUNNING
containers.update(state)
print(containers.get(state.id[:4]).status)  # ContainerStatus.RUNNING

rules = RewriteRules(
    rootfs=state.rootfs_path,
    allowed_ports=[8080],
    nat_rules=[NatRule("db", 5432, "10.0.0.5", 5432)],
)
print(rules.rewrite_path("/proc/meminfo"))  # None (passed through)
print(rules.port_allowed(22))               # False
print(rules.lookup_nat("db", 5432).target_ipv4())  # 10.0.0.5
```