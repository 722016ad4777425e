"""Tests for PackageInfo decoding and serialization."""

import pytest

from bfm_cli.brew.info import (
    BUILD, DEPENDENCY_KINDS, OPTIONAL, RECOMMENDED, REQUIRED, PackageInfo
)


VIM_JSON = {
    "name": "vim",
    "full_name": "vim",
    "desc": "Vi 'workalike' with many additional features",
    "homepage": "https://vim.sourceforge.io/",
    "oldname": None,
    "aliases": [],
    "versions": {"stable": "8.0.0596", "bottle": True, "devel": None, "head": "HEAD"},
    "revision": 0,
    "version_scheme": 0,
    "installed": [
        {
            "version": "8.0.0596",
            "used_options": ["--with-override-system-vi"],
            "built_as_bottle": False,
            "poured_from_bottle": False,
            "runtime_dependencies": [{"full_name": "python", "version": "2.7.13"}],
            "installed_as_dependency": False,
            "installed_on_request": True,
        }
    ],
    "linked_keg": "8.0.0596",
    "pinned": False,
    "outdated": True,
    "keg_only": False,
    "dependencies": ["python"],
    "recommended_dependencies": ["ruby"],
    "optional_dependencies": ["lua", "luajit"],
    "build_dependencies": ["pkg-config"],
    "conflicts_with": ["ex-vi", "macvim"],
    "caveats": None,
    "requirements": [{"name": "python", "default_formula": "python", "cask": None, "download": None}],
    "options": [{"option": "--with-override-system-vi", "description": "Override system vi"}],
    "bottle": {
        "stable": {
            "rebuild": 0,
            "cellar": "/usr/local/Cellar",
            "prefix": "/usr/local",
            "root_url": "https://homebrew.bintray.com/bottles",
            "files": {
                "sierra": {"url": "https://example.invalid/vim.sierra.bottle.tar.gz", "sha256": "abc"},
            },
        }
    },
    "unknown_future_field": {"ignored": True},
}


class TestPackageInfoFromDict:

    def test_decodes_core_fields(self):
        info = PackageInfo.from_dict(VIM_JSON)
        assert info.full_name == "vim"
        assert info.versions.stable == "8.0.0596"
        assert info.versions.bottle is True
        assert info.outdated is True
        assert info.installed[0].used_options == ["--with-override-system-vi"]
        assert info.installed[0].runtime_dependencies[0].full_name == "python"
        assert info.requirements[0].default_formula == "python"
        assert info.options[0].option == "--with-override-system-vi"
        assert info.bottle.files["sierra"].sha256 == "abc"
        assert info.is_installed

    def test_missing_fields_use_empty_defaults(self):
        info = PackageInfo.from_dict({"name": "a2ps", "full_name": "a2ps"})
        assert info.dependencies == []
        assert info.build_dependencies == []
        assert info.installed == []
        assert info.versions.stable is None
        assert not info.is_installed

    def test_full_name_falls_back_to_name(self):
        info = PackageInfo.from_dict({"name": "wget"})
        assert info.full_name == "wget"

    def test_rejects_non_object(self):
        with pytest.raises(ValueError):
            PackageInfo.from_dict(["vim"])

    def test_rejects_nameless_object(self):
        with pytest.raises(ValueError):
            PackageInfo.from_dict({"desc": "no name"})

    @pytest.mark.parametrize("field, value", [
        ("versions", "1.0"),
        ("installed", ["1.0"]),
        ("dependencies", "python"),
        ("build_dependencies", [1]),
        ("options", ["--HEAD"]),
    ])
    def test_rejects_wrongly_shaped_fields(self, field, value):
        with pytest.raises(ValueError):
            PackageInfo.from_dict({"name": "vim", field: value})


class TestDependencyNames:

    def test_kinds_are_concatenated_in_order(self):
        info = PackageInfo.from_dict(VIM_JSON)
        assert info.dependency_names(DEPENDENCY_KINDS) == [
            "python", "ruby", "lua", "luajit", "pkg-config"
        ]

    def test_single_kind(self):
        info = PackageInfo.from_dict(VIM_JSON)
        assert info.dependency_names((REQUIRED,)) == ["python"]
        assert info.dependency_names((RECOMMENDED,)) == ["ruby"]
        assert info.dependency_names((OPTIONAL,)) == ["lua", "luajit"]
        assert info.dependency_names((BUILD,)) == ["pkg-config"]

    def test_unknown_kind(self):
        info = PackageInfo.from_dict(VIM_JSON)
        with pytest.raises(ValueError):
            info.dependency_names(("conflicts_with",))


class TestToDict:

    def test_uses_upstream_field_names(self):
        data = PackageInfo.from_dict(VIM_JSON).to_dict()
        assert data["recommended_dependencies"] == ["ruby"]
        assert data["bottle"]["stable"]["files"]["sierra"]["url"].endswith("tar.gz")
        assert "unknown_future_field" not in data

    def test_empty_bottle_is_omitted(self):
        data = PackageInfo(name="a2ps", full_name="a2ps").to_dict()
        assert data["bottle"] == {}

    def test_decodes_its_own_output(self):
        info = PackageInfo.from_dict(VIM_JSON)
        assert PackageInfo.from_dict(info.to_dict()) == info
