from __future__ import annotations

from collections.abc import Mapping

import yaml

from ghr.core.result import Err, Ok, Result
from ghr.core.structured import (
    as_str_dict,
    get_bool,
    get_raw_str,
    get_str,
    get_str_list,
    get_table,
)
from ghr.git.history import HistoryReader
from ghr.services.release.errors import ReleaseError
from ghr.services.release.model import CommitCategory, CommitMatcher, ReleaseConfig

DEFAULT_RELEASE_FILE = "RELEASE"


def _invalid(message: str, source: str) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="config_read", message=f"{message}: {source}", hint=source))


def _optional_bool(
    table: Mapping[str, object], key: str, *, source: str, where: str = ""
) -> Result[bool, ReleaseError]:
    if table.get(key) is None:
        return Ok(False)
    flag = get_bool(table, key)
    if flag is None:
        return _invalid(f"{where}{key} must be a boolean", source)
    return Ok(flag)


def _optional_str_list(
    table: Mapping[str, object], key: str, *, source: str, where: str
) -> Result[tuple[str, ...], ReleaseError]:
    if table.get(key) is None:
        return Ok(())
    items = get_str_list(table, key)
    if items is None:
        return _invalid(f"{where}{key} must be a list of strings", source)
    return Ok(tuple(items))


def parse_matcher(
    table: Mapping[str, object], *, source: str, where: str
) -> Result[CommitMatcher, ReleaseError]:
    """Read `prefixes`, `contains` and `parentOfMergeCommit` from a table."""
    prefixes = _optional_str_list(table, "prefixes", source=source, where=where)
    if isinstance(prefixes, Err):
        return prefixes
    contains = _optional_str_list(table, "contains", source=source, where=where)
    if isinstance(contains, Err):
        return contains
    parent = _optional_bool(table, "parentOfMergeCommit", source=source, where=where)
    if isinstance(parent, Err):
        return parent
    return Ok(
        CommitMatcher(
            prefixes=prefixes.value,
            contains=contains.value,
            parent_of_merge_commit=parent.value,
        )
    )


def _matcher_field(
    data: Mapping[str, object], key: str, *, source: str
) -> Result[CommitMatcher, ReleaseError]:
    if data.get(key) is None:
        return Ok(CommitMatcher())
    table = get_table(data, key)
    if table is None:
        return _invalid(f"{key} must be a mapping", source)
    return parse_matcher(table, source=source, where=f"{key}.")


def _categories(
    data: Mapping[str, object], *, source: str
) -> Result[tuple[CommitCategory, ...], ReleaseError]:
    raw = data.get("commitCategories")
    if raw is None:
        return Ok(())
    if not isinstance(raw, list):
        return _invalid("commitCategories must be a list", source)

    categories: list[CommitCategory] = []
    for i, item in enumerate(raw):
        where = f"commitCategories[{i}]."
        table = as_str_dict(item)
        if table is None:
            return _invalid(f"commitCategories[{i}] must be a mapping", source)
        title = get_str(table, "title")
        if title is None:
            return _invalid(f"{where}title must be specified", source)
        matcher = parse_matcher(table, source=source, where=where)
        if isinstance(matcher, Err):
            return matcher
        categories.append(
            CommitCategory(
                id=get_str(table, "id") or f"_category_{i}",
                title=title,
                matcher=matcher.value,
            )
        )
    return Ok(tuple(categories))


def parse_release_config(text: str, *, source: str) -> Result[ReleaseConfig, ReleaseError]:
    try:
        obj: object = yaml.safe_load(text)
    except yaml.YAMLError as e:
        return Err(
            ReleaseError(kind="config_read", message=f"invalid YAML in {source}: {e}", hint=source)
        )

    data = as_str_dict(obj)
    if data is None:
        return _invalid("release config must be a mapping", source)

    tag = get_str(data, "tag")
    if tag is None:
        return Err(
            ReleaseError(
                kind="config_read",
                message=f"tag must be specified: {source}",
                hint="tag must be a non-empty string (quote numeric tags)",
            )
        )

    prerelease = _optional_bool(data, "prerelease", source=source)
    if isinstance(prerelease, Err):
        return prerelease

    body = get_raw_str(data, "body")
    if body is not None and not body.strip():
        body = None

    include = _matcher_field(data, "commitInclude", source=source)
    if isinstance(include, Err):
        return include
    exclude = _matcher_field(data, "commitExclude", source=source)
    if isinstance(exclude, Err):
        return exclude
    categories = _categories(data, source=source)
    if isinstance(categories, Err):
        return categories

    generator: Mapping[str, object] = {}
    if data.get("releaseNoteGenerator") is not None:
        table = get_table(data, "releaseNoteGenerator")
        if table is None:
            return _invalid("releaseNoteGenerator must be a mapping", source)
        generator = table
    use_block = _optional_bool(
        generator, "useReleaseNoteBlock", source=source, where="releaseNoteGenerator."
    )
    if isinstance(use_block, Err):
        return use_block
    show_header = _optional_bool(
        generator, "showHeader", source=source, where="releaseNoteGenerator."
    )
    if isinstance(show_header, Err):
        return show_header

    return Ok(
        ReleaseConfig(
            tag=tag,
            title=get_str(data, "title"),
            commitish=get_str(data, "commitish"),
            body=body,
            prerelease=prerelease.value,
            commit_include=include.value,
            commit_exclude=exclude.value,
            categories=categories.value,
            use_release_note_block=use_block.value,
            show_header=show_header.value,
        )
    )


def load_release_config(
    *,
    history: HistoryReader,
    revision: str,
    path: str,
) -> Result[ReleaseConfig, ReleaseError]:
    """Read and parse the release file as it was at `revision`."""
    text = history.read_file(revision, path)
    if isinstance(text, Err):
        return Err(
            ReleaseError(
                kind="config_read",
                message=f"failed to read {path} at {revision}",
                hint=text.error.message,
            )
        )
    return parse_release_config(text.value, source=f"{path}@{revision}")
