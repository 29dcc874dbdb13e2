# SPDX-License-Identifier: MIT
"""Face extraction and point deduplication for indexed face sets."""

from __future__ import annotations

import numpy as np

from vrml_fixer.errors import MalformedValueError
from vrml_fixer.scene.fields import Vec3
from vrml_fixer.scene.nodes import Coordinate, IndexedFaceSet

Face = list[Vec3]

FACE_END = -1


def get_faces(ifs: IndexedFaceSet) -> list[Face]:
    """Resolve the coordinate indices of a face set into point lists.

    A trailing run of indices without a terminating -1 is a face too.
    Empty runs (two terminators in a row) are dropped.

    Raises:
        MalformedValueError: if an index is out of range or coords are missing
    """
    coord = ifs.coord
    if coord is None:
        if len(ifs.coord_index) > 0:
            raise MalformedValueError("IndexedFaceSet has coordIndex but no coord")
        return []
    if not isinstance(coord, Coordinate):
        raise MalformedValueError(f"IndexedFaceSet coord is a {coord.type_name}")

    points = coord.point
    faces: list[Face] = []
    current: Face = []
    for index in ifs.coord_index:
        if index == FACE_END:
            if current:
                faces.append(current)
            current = []
        elif 0 <= index < len(points):
            current.append(points[index])
        else:
            raise MalformedValueError(
                f"Coordinate index {index} out of range for {len(points)} points"
            )
    if current:
        faces.append(current)
    return faces


def face_key(face: Face, ignore_winding: bool = True) -> tuple[Vec3, ...]:
    """Key under which two faces count as duplicates.

    With ``ignore_winding`` the key is the sorted point multiset, so a face
    and its reverse (opposite normal) collapse into one. Otherwise the key
    is the smallest rotation of the point cycle: the same polygon listed
    from another start vertex still matches, a reversed one does not.
    """
    if ignore_winding:
        return tuple(sorted(face))
    return min(tuple(face[i:] + face[:i]) for i in range(len(face)))


def dedupe_faces(faces: list[Face], ignore_winding: bool = True) -> list[Face]:
    """Drop faces whose key matches an earlier face, keeping order."""
    seen: set[tuple[Vec3, ...]] = set()
    unique: list[Face] = []
    for face in faces:
        key = face_key(face, ignore_winding)
        if key in seen:
            continue
        seen.add(key)
        unique.append(face)
    return unique


def index_faces(faces: list[Face]) -> tuple[list[Vec3], list[int]]:
    """Build a shared point list and a -1 terminated index list for faces.

    Points are deduplicated by exact value and kept in order of first
    appearance.

    Returns:
        Tuple of (points, coord_index)
    """
    flat = [point for face in faces for point in face]
    if not flat:
        return [], []

    positions = np.array(flat, dtype=np.float64).reshape(-1, 3)
    _, first, inverse = np.unique(
        positions, axis=0, return_index=True, return_inverse=True
    )
    # np.unique sorts rows; renumber them by first appearance instead
    order = np.argsort(first, kind="stable")
    rank = np.empty_like(order)
    rank[order] = np.arange(len(order))
    point_index = rank[inverse.reshape(-1)]

    points = [flat[i] for i in first[order]]

    coord_index: list[int] = []
    cursor = 0
    for face in faces:
        coord_index.extend(int(i) for i in point_index[cursor : cursor + len(face)])
        coord_index.append(FACE_END)
        cursor += len(face)
    return points, coord_index
