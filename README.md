# imagescope

Building blocks for inspecting container images. The package has no
dependencies outside the standard library.

## Modules

- `imagescope.node`: `Node`, a tree node identified by a string id
  (`id()`, `copy()`), and `nodes_equal(first, second)`, which tells whether
  two collections hold the very same node objects, ignoring order.
- `imagescope.tree`: `Tree`, a forest of nodes keyed by id with `add_root`,
  `add_child`, `replace`, `remove_node` (which removes the whole subtree and
  returns the removed nodes), `children`, `parent`, `roots`, `nodes`,
  `node`, `has_node`, `copy` and `len()`. Failing operations raise
  `TreeError`.
- `imagescope.walker`: `DepthFirstWalker(reader, visitor, conditions)`
  walks depth-first, visiting children in ascending id order. `walk(start)`
  returns the node where the walk was stopped, or `None`; `walk_all()`
  walks from every root; `visited(node)` tells whether a node was visited.
  `WalkConditions` has `should_terminate`, `should_visit` and
  `should_continue_branch` hooks.
- `imagescope.platform`: `parse_platform(specifier)` turns `os`,
  `os/arch`, `arch`, `arch/variant` or `os/arch/variant` into a normalized
  `Platform`; the OS is `linux` when none is given. Bad specifiers raise
  `PlatformError`. Also `normalize_os`, `normalize_arch`, `is_known_os`
  and `is_known_arch`.
- `imagescope.registry`: `RegistryCredentials` and `RegistryOptions`.
  `RegistryOptions.authenticator(registry)` returns the first matching
  `BasicAuth` (username and password both set) or `BearerAuth` (token set),
  or `None`.
- `imagescope.source`: the `Source` enum, `parse_source_scheme(scheme)`,
  `detect_source(user_input)` returning `(source, location)`, and
  `detect_source_from_path(path)`, which recognises an OCI layout
  directory, an OCI archive (`oci-layout` entry) and a docker archive
  (`manifest.json` entry). A leading `~` in a path location is expanded.
- `imagescope.metadata`: image `Metadata` (`ids()` gives the tags then the
  id), `normalize_tag(tag)`, the options `with_tags`, `with_manifest`,
  `with_manifest_digest`, `with_config`, `with_repo_digests`,
  `with_platform`, `with_architecture` and `with_os`, and
  `apply_metadata(metadata, options)`, which applies them in order.
- `imagescope.file_catalog`: `FileCatalog` stores a `FileCatalogEntry` per
  file reference (`add`, `get`, `in`, `get_by_mime_type`,
  `file_contents`). Unknown references raise `FileNotInCatalogError`.
- `imagescope.pull_status`: `PullStatus.on_event(event)` takes decoded pull
  status events (mappings with `id`, `status` and `progressDetail`) and
  tracks a `PullPhase` and `Progress` per layer; the first event with an id
  names the image and is not counted as a layer. `layers()` and
  `current(layer)` read the state.
- `imagescope.manifest`: `parse_manifest(raw)`, `extract_manifest(tar_path)`
  and `generate_oci_manifest(tar_path, manifest)` for docker archives, and
  `assemble_oci_manifest(config_bytes, layer_sizes)`, which builds an OCI
  manifest as a dict. Errors raise `ManifestError`; archives with more than
  one image raise `MultipleManifestsError`.

## Install

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from imagescope.platform import parse_platform
from imagescope.source import Source, detect_source, parse_source_scheme

print(parse_platform("arm"))         # linux/arm/v7
assert parse_source_scheme("oci-dir") is Source.OCI_DIRECTORY
assert detect_source("docker:alpine:latest") == (Source.DOCKER_DAEMON, "alpine:latest")
```

```python
from imagescope.metadata import Metadata, apply_metadata, with_platform, with_tags

metadata = Metadata()
apply_metadata(metadata, [with_platform("linux/arm64"), with_tags("alpine")])
print(metadata.os, metadata.architecture)   # linux arm64
print(metadata.tags)                        # ['index.docker.io/library/alpine:latest']
```

```python
from imagescope.node import Node
from imagescope.tree import Tree
from imagescope.walker import DepthFirstWalker

tree = Tree()
root, home = Node("/"), Node("/home")
tree.add_root(root)
tree.add_child(root, home)

seen = []
DepthFirstWalker(tree, lambda node: seen.append(node.id())).walk_all()
print(seen)                          # ['/', '/home']
```

```python
from imagescope.registry import RegistryCredentials, RegistryOptions

options = RegistryOptions(
    credentials=[RegistryCredentials(authority="localhost:5000", token="token")]
)
print(options.authenticator("localhost:5000"))
```

## What it does not do

The package does not fetch images: it does not talk to a docker or podman
daemon or to a registry, it does not unpack layers or build file trees from
them, and it has no command-line program. It provides the pieces such a
tool is built from: metadata, platform and source handling, manifests,
pull progress tracking, a file catalog and a node tree with a walker.