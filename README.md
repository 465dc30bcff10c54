# sodf

A library for describing physical objects such as lab containers and
devices. It covers shape geometry, rigid-frame alignment, liquid fill height
and volume, resolution of resource URIs to local files, a small
entity-component database and a weighted directed graph.

The only runtime dependency is `numpy`. Vectors are length-3 arrays.
Rotations are 3x3 arrays. Rigid transforms are 4x4 homogeneous matrices.

## Install

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

### `sodf.linalg`

Helpers for axes and frames:

- `compute_orientation_from_axes(x_axis, y_axis, z_axis)` returns the nearest
  proper rotation to the normalised axes. It raises `ValueError` for a
  left-handed frame.
- `build_isometry_from_z_axis(pos, axis)` and
  `build_isometry_from_zx_axes(pos, z_axis, x_axis)` build 4x4 transforms.
- `build_axis_alignment(z_shape, x_shape, z_stack, x_stack)` returns the
  rotation that takes one frame onto another.
- `compute_orthogonal_axis(axis)` returns a unit vector orthogonal to `axis`.
- `is_unit_vector`, `are_vectors_orthogonal` and `are_vectors_orthonormal`
  check vectors. `are_vectors_orthonormal` takes two or more vectors and a
  keyword `tol`.

### `sodf.alignment`

`align_center_frames(w_t_a, w_t_b, x_t_c, x_t_d, epsilon)` returns the world
pose of frame X that lays segment CD along segment AB. Any small length
difference is split evenly between the two ends. It raises `ValueError` in
two cases:

- a segment is degenerate;
- the two lengths differ by more than `epsilon`.

### `sodf.shape`

- `ShapeType` is an enum whose values are the names `"Rectangle"`,
  `"Circle"`, `"Triangle"`, `"Polygon"`, `"Box"`, `"Cylinder"`, `"Sphere"`,
  `"Cone"`, `"SphericalSegment"`, `"Mesh"`, `"Plane"` and `"Line"`.
- `Shape` is a dataclass with the fields `type`, `dimensions`, `axes`,
  `vertices` and `mesh_uri`.

The functions are:

- `is_2d_shape`
- `shape_centroid`
- `shape_height`
- `shape_base_radius`, `shape_top_radius` and `shape_max_radius`
- `shape_normal_axis`, `shape_reference_axis` and `shape_symmetry_axis`
- `top_radius_at_height`
- `truncate_shape_to_height`
- `shape_type_from_string` and `shape_type_to_string`

Unsupported cases raise `ValueError`.

### `sodf.domain_shape`

`DomainShape` is the abstract base of fillable shapes. It has the properties
`max_fill_height` and `max_fill_volume`, and the methods `fill_height(volume)`
and `fill_volume(height)`.

The stack helpers treat an ordered list of shapes, bottom first, as one
vessel:

- `stacked_fill_height(shapes, volume, tolerance)`
- `stacked_fill_volume(shapes, height, tolerance)`
- `stacked_max_fill_height(shapes)`
- `stacked_max_fill_volume(shapes)`

`stacked_fill_height` and `stacked_fill_volume` return `0.0` when the query
is out of range.

### `sodf.fluid_domain_shape`

This module provides the concrete shapes:

- `FluidBoxShape(width, length, height)`
- `FluidCylinderShape(radius, height)`
- `FluidConeShape(base_radius, top_radius, height)`, a frustum
- `FluidSphericalSegmentShape(base_radius, top_radius, height)`

`from_base_sphere_radius(base_radius, sphere_radius)` builds a spherical
segment. Fill queries return `0.0` for a height or volume that is
non-positive or above the maximum.

### `sodf.uri_resolver`

`resolve_resource_uri(uri, current_xml_dir="", env_roots=None)` returns a
`Resolved(local_path, from_cache, source_root)`. It handles three kinds of
URI:

- **`http://` and `https://` URIs** are downloaded once into a local cache
  (`~/.cache/sodf`).
- **`sodf://rel/path` URIs** are searched in the roots listed in
  `env_roots`. When `env_roots` is not given, the roots come from the
  `SODF_DATABASE_PATH` environment variable, separated by `os.pathsep`. A
  root may be an HTTP(S) base URL.
- **Anything else** is a file path. A relative path is taken from
  `current_xml_dir`.

Errors are raised as follows:

- `RuntimeError` when no roots are configured, or when a direct download
  fails;
- `FileNotFoundError` when a `sodf://` resource is found in no root.

### `sodf.ecs` and `sodf.ecs_query`

`Database` stores entities, identified by `EntityId(index, version)`, and
their components. Components are keyed by type, and `Tag` values are
data-less components.

Entity methods:

- `create_entity`, `destroy_entity`, `exists`

Component methods:

- `add_component`, `remove_component`
- `get_component`, `find_component`, `get_component_by_id`
- `has_component`, `count`

Other methods:

- `to_index` and `from_index` convert between an `EntityId` and a plain
  index.
- `len(db)` gives the number of live entities.

`Database.visit(visitor, *params)` calls `visitor` once for each entity that
matches every parameter, and returns the results in a list. The parameters
are:

- a component type, which must be present and is loaded;
- `EntityId`, which passes the entity's id;
- a `Tag`;
- `Require(T)`, which requires `T` without loading it;
- `Deny(T)`, which rejects entities that have `T`;
- `Optional(T)`, which always matches and passes an `Optional` that is
  truthy and has `.get()` when `T` is present.

### `sodf.directed_graph`

`DirectedGraph(edges, weights)` holds vertices `0..n-1` and non-negative
integer weights. It has two methods:

- `find_shortest_path(start, end)` returns the vertex list of a cheapest
  path, or `None` when `end` cannot be reached. It uses Dijkstra's algorithm
  and stops as soon as `end` is settled.
- `save_dot(path, node_names)` writes the graph as DOT. Edges of the last
  search tree are black and the others are grey.

## Example

```python
from dataclasses import dataclass

from sodf.domain_shape import stacked_fill_height
from sodf.ecs import Database, EntityId
from sodf.fluid_domain_shape import FluidConeShape, FluidCylinderShape

tube = [FluidConeShape(0.5, 0.3, 0.8), FluidCylinderShape(0.3, 1.0)]
height = stacked_fill_height(tube, 0.3, 1e-9)


@dataclass
class Label:
    text: str


db = Database()
eid = db.create_entity()
db.add_component(eid, Label("well A1"))
found = db.visit(lambda e, label: (e, label.text), EntityId, Label)
```

## What is not included

The package works on shapes, domains, frames and entities that you build in
code. It does not cover the following:

- It does not read object or scene description documents.
- It does not provide systems that compute scene-graph transforms, or that
  run state machines over the database.
- It has no command-line interface.