"""
Tests for the JavaScript module-format scanner.

Each test feeds a small source snippet and checks the detected flags
and static dependencies.
"""

import pytest
from analyze_npm.analysis.scanner import ScanError, ScanResult, scan_source


class TestEsm:

    def test_default_import_and_export(self):
        result = scan_source("import React from 'react';\nexport default function App() {}\n")
        assert result.is_esm
        assert not result.is_cjs
        assert result.dependencies == {"react"}

    def test_named_namespace_and_side_effect_imports(self):
        code = (
            "import { a, b as c } from './ab.js';\n"
            "import * as ns from \"ns\";\n"
            "import './polyfill';\n"
            "import def, { named } from 'mixed';\n"
        )
        result = scan_source(code)
        assert result.is_esm
        assert result.dependencies == {"./ab.js", "ns", "./polyfill", "mixed"}

    def test_export_from(self):
        result = scan_source("export * from './a';\nexport { b } from './b';")
        assert result.is_esm
        assert result.dependencies == {"./a", "./b"}

    def test_local_export_has_no_dependency(self):
        result = scan_source("const x = 1;\nexport { x };")
        assert result.is_esm
        assert result.dependencies == set()

    def test_imported_binding_shadows_require(self):
        result = scan_source("import require from 'req';\nrequire('x');")
        assert result.is_esm
        assert not result.is_cjs
        assert result.dependencies == {"req"}


class TestDynamicImport:

    def test_static_and_computed_specifiers(self):
        code = (
            "async function load(name) {\n"
            "  const m = await import('./mod.js');\n"
            "  const n = await import(name);\n"
            "}\n"
        )
        result = scan_source(code)
        assert result.dynamic_import
        assert result.non_static_deps
        assert result.dependencies == {"./mod.js"}
        assert not result.is_esm

    def test_template_specifier(self):
        result = scan_source("import(`./locale/${lang}.js`)")
        assert result.dynamic_import
        assert result.non_static_deps
        assert result.dependencies == set()

    def test_concatenated_strings_are_static(self):
        result = scan_source("import('./a' + '/b.js')")
        assert result.dependencies == {"./a/b.js"}
        assert not result.non_static_deps


class TestCommonJs:

    def test_require_and_module_exports(self):
        result = scan_source("const path = require('path');\nmodule.exports = { join: path.join };")
        assert result.is_cjs
        assert not result.is_esm
        assert not result.non_static_exports
        assert result.dependencies == {"path"}

    def test_static_exports_member(self):
        result = scan_source("exports.foo = 1;\nexports['bar'] = 2;\nmodule.exports.baz = 3;")
        assert result.is_cjs
        assert not result.non_static_exports

    def test_computed_export_is_not_static(self):
        result = scan_source("exports[name] = 2;")
        assert result.is_cjs
        assert result.non_static_exports

    def test_bare_module_reference_is_not_static(self):
        result = scan_source("if (typeof module !== 'undefined') { module.exports = api; }")
        assert result.is_cjs
        assert result.non_static_exports

    def test_module_in_conditional_expression(self):
        result = scan_source("var m = typeof x ? module : null;")
        assert result.is_cjs
        assert result.non_static_exports

    def test_exports_passed_as_value(self):
        result = scan_source("factory(exports);")
        assert result.is_cjs
        assert result.non_static_exports

    def test_module_exports_used_as_value(self):
        result = scan_source("Object.assign(module.exports, helpers);")
        assert result.is_cjs
        assert result.non_static_exports

    def test_computed_require(self):
        result = scan_source("const mod = require(name);")
        assert result.is_cjs
        assert result.non_static_deps
        assert result.dependencies == set()

    def test_require_without_arguments(self):
        result = scan_source("require();")
        assert result.is_cjs
        assert result.non_static_deps

    def test_template_require_without_expression(self):
        result = scan_source("require(`./a`)")
        assert result.dependencies == {"./a"}
        assert not result.non_static_deps

    def test_require_inside_template_expression(self):
        result = scan_source("const s = `${require('b')}`;")
        assert result.is_cjs
        assert result.dependencies == {"b"}

    def test_require_resolve_is_not_a_require(self):
        result = scan_source("const p = require.resolve('x');")
        assert not result.is_cjs
        assert result.dependencies == set()


class TestScopes:
    """`require`, `module` and `exports` only count when nothing declares them."""

    def test_local_require_function(self):
        result = scan_source("function require(x) { return x; }\nrequire('a');")
        assert not result.is_cjs
        assert result.dependencies == set()

    def test_local_module_variable(self):
        result = scan_source("const module = {};\nmodule.exports = 1;")
        assert not result.is_cjs
        assert not result.non_static_exports

    def test_wrapper_function_parameters(self):
        result = scan_source(
            "(function (require, module, exports) { module.exports = require('./a'); })"
        )
        assert result == ScanResult()

    def test_parameters_do_not_leak_out_of_function(self):
        code = (
            "function wrap(require) { return require('inner'); }\n"
            "require('outer');\n"
        )
        result = scan_source(code)
        assert result.is_cjs
        assert result.dependencies == {"outer"}

    def test_hoisted_var_shadows_whole_function(self):
        code = (
            "function f() {\n"
            "  exports.a = 1;\n"
            "  if (x) { var exports = {}; }\n"
            "}\n"
        )
        result = scan_source(code)
        assert not result.is_cjs

    def test_block_scoped_binding(self):
        code = (
            "{ let require = load; require('hidden'); }\n"
            "require('visible');\n"
        )
        result = scan_source(code)
        assert result.dependencies == {"visible"}

    def test_catch_parameter(self):
        result = scan_source("try { f(); } catch (module) { module.exports = 1; }")
        assert not result.is_cjs

    def test_destructured_parameter(self):
        result = scan_source("const f = ({ exports }) => exports.x;")
        assert not result.is_cjs


class TestNoise:
    """Text that only looks like module syntax."""

    def test_comments_and_strings(self):
        code = (
            "// require('fake')\n"
            "/* import x from 'y' */\n"
            "const s = \"module.exports = require('z')\";\n"
        )
        result = scan_source(code)
        assert not result.is_cjs
        assert not result.is_esm
        assert result.dependencies == set()

    def test_object_keys(self):
        result = scan_source("const o = { module: 1, exports: 2 };")
        assert not result.is_cjs

    def test_member_named_like_keywords(self):
        result = scan_source("config.module.rules = []; obj.exports = 1; x.require('a');")
        assert not result.is_cjs
        assert result.dependencies == set()

    def test_regex_literal_with_quote(self):
        result = scan_source("const re = /'/;\nconst x = require('y');")
        assert result.dependencies == {"y"}

    def test_regex_literal_after_return(self):
        result = scan_source("function f(x) { return /'/.test(x) ? require('a') : 0; }")
        assert result.dependencies == {"a"}


class TestParsing:

    def test_hashbang(self):
        result = scan_source("#!/usr/bin/env node\nrequire('./cli');\n")
        assert result.dependencies == {"./cli"}

    def test_sloppy_script_fallback(self):
        result = scan_source("with (scope) { require('a'); }")
        assert result.is_cjs
        assert result.dependencies == {"a"}

    def test_invalid_source_raises(self):
        with pytest.raises(ScanError):
            scan_source("function (")
