"""End-to-end tests for the importer boundaries."""
from pathlib import Path

import pytest

from sass_importer import (
    ImporterOptions,
    create_file_importer,
    create_importer,
    create_libsass_importer,
    resolve_specifier,
)


@pytest.fixture
def defaults(project: Path) -> dict:
    return {"resolverOptions": {"basedir": str(project)}}


def call_legacy(importer, url, prev=""):
    calls = []
    importer(url, prev, calls.append)
    assert len(calls) == 1
    return calls[0]

# --- Tests for the callback importer (no running loop) ---

def test_unresolvable_urls_report_none(defaults):
    importer = create_importer(defaults)
    assert call_legacy(importer, "") is None
    assert call_legacy(importer, "@hoge/fuga") is None
    assert call_legacy(importer, None) is None

@pytest.mark.parametrize("url, expected", [
    ("bootstrap", "bootstrap/scss/bootstrap.scss"),
    ("~bootstrap", "bootstrap/scss/bootstrap.scss"),
    ("bootstrap/scss/accordion", "bootstrap/scss/_accordion.scss"),
    ("bootstrap/scss/mixins/banner", "bootstrap/scss/mixins/_banner.scss"),
    ("@hidoo/unit", "@hidoo/unit/src/index.scss"),
    ("~@hidoo/unit", "@hidoo/unit/src/index.scss"),
    ("@hidoo/unit/src/settings", "@hidoo/unit/src/_settings.scss"),
    ("@hidoo/unit/src/unit/icon/core", "@hidoo/unit/src/unit/icon/_core.scss"),
    ("@scope/pkg", "@scope/pkg/styles/main.scss"),
    ("@scope/pkg/.", "@scope/pkg/styles/main.scss"),
    ("@scope/pkg/sub/widget", "@scope/pkg/sub/_widget.scss"),
])
def test_callback_importer_resolves(project: Path, defaults, url, expected):
    result = call_legacy(create_importer(defaults), url)
    assert result == {"file": str(project / "node_modules" / expected)}

def test_custom_prefix(project: Path, defaults):
    importer = create_importer({**defaults, "packagePrefix": "^"})
    assert call_legacy(importer, "^bootstrap") == {"file": str(project / "node_modules/bootstrap/scss/bootstrap.scss")}
    assert call_legacy(importer, "~bootstrap") is None

def test_resolver_failure_collapses_to_none():
    importer = create_importer({"resolverOptions": {"basedir": 12}})
    assert call_legacy(importer, "bootstrap") is None

def test_basedir_defaults_to_containing_file(project: Path):
    styles = project / "styles"
    styles.mkdir()
    main = styles / "main.scss"
    main.write_text('@use "bootstrap";\n')
    result = call_legacy(create_importer(), "bootstrap", str(main))
    assert result == {"file": str(project / "node_modules/bootstrap/scss/bootstrap.scss")}

def test_explicit_basedir_wins_over_containing_file(tmp_path: Path, project: Path, defaults):
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    result = call_legacy(create_importer(defaults), "bootstrap", str(elsewhere / "x.scss"))
    assert result is not None

# --- Tests for the callback importer inside a running loop ---

@pytest.mark.asyncio
async def test_callback_importer_in_running_loop(project: Path, defaults):
    calls = []
    task = create_importer(defaults)("bootstrap/scss/accordion", "", calls.append)
    await task
    assert calls == [{"file": str(project / "node_modules/bootstrap/scss/_accordion.scss")}]

@pytest.mark.asyncio
async def test_callback_importer_in_running_loop_not_found(defaults):
    calls = []
    task = create_importer(defaults)("", "", calls.append)
    await task
    assert calls == [None]

# --- Tests for the file importer ---

@pytest.mark.asyncio
async def test_file_importer_returns_file_url(project: Path, defaults):
    importer = create_file_importer(defaults)
    url = await importer.find_file_url("@scope/pkg/sub/widget", containing_url=None)
    assert url == (project / "node_modules/@scope/pkg/sub/_widget.scss").as_uri()
    assert url.startswith("file://")

@pytest.mark.asyncio
async def test_file_importer_prefix_equivalence(defaults):
    importer = create_file_importer(defaults)
    assert await importer.find_file_url("~@scope/pkg") == await importer.find_file_url("@scope/pkg")

@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["", "not-installed", "bootstrap/scss/nope"])
async def test_file_importer_none(defaults, url):
    assert await create_file_importer(defaults).find_file_url(url) is None

@pytest.mark.asyncio
async def test_file_importer_uses_containing_url(project: Path):
    styles = project / "styles"
    styles.mkdir()
    containing = (styles / "main.scss").as_uri()
    (styles / "main.scss").write_text("")
    url = await create_file_importer().find_file_url("bootstrap", containing_url=containing)
    assert url == (project / "node_modules/bootstrap/scss/bootstrap.scss").as_uri()

@pytest.mark.asyncio
async def test_file_importer_resolver_failure_is_none():
    importer = create_file_importer({"resolverOptions": {"extensions": "bad"}})
    assert await importer.find_file_url("bootstrap") is None

# --- Tests for the shared core ---

@pytest.mark.asyncio
async def test_resolve_specifier_keeps_error_internally():
    result = await resolve_specifier("bootstrap", {"resolverOptions": {"basedir": 12}})
    assert result.error is not None
    assert result.file is None

@pytest.mark.asyncio
async def test_resolve_specifier_accepts_options_object(project: Path):
    options = ImporterOptions(resolver_options={"basedir": str(project)})
    result = await resolve_specifier("bootstrap", options)
    assert result.found

# --- Tests for the libsass adapter ---

def test_libsass_importer(project: Path, defaults):
    importer = create_libsass_importer(defaults)
    assert importer("bootstrap/scss/accordion", "stdin") == [(str(project / "node_modules/bootstrap/scss/_accordion.scss"),)]
    assert importer("variables", "stdin") is None

def test_non_mapping_options_use_defaults(project: Path):
    styles = project / "styles"
    styles.mkdir()
    (styles / "main.scss").write_text("")
    result = call_legacy(create_importer(["x"]), "bootstrap", str(styles / "main.scss"))
    assert result == {"file": str(project / "node_modules/bootstrap/scss/bootstrap.scss")}
