"""Behaviour of the built-in rule table against representative sources."""

from __future__ import annotations

import pytest

from conformlint.models import ClassifiedFile
from conformlint.rules import default_registry


def _run(rule_id: str, path: str, role: str, content: str):
    rule = default_registry().get(rule_id)
    file = ClassifiedFile(path=path, role=role, content=content)
    assert rule.applies_to(file)
    return rule.check.run(file)


@pytest.mark.parametrize(
    ("rule_id", "path", "role", "content"),
    [
        (
            "frontend-jsx-import-source",
            "frontend/App.tsx",
            "frontend-component",
            "/** @jsxImportSource https://esm.sh/react@18.2.0 */\nexport function App() {}\n",
        ),
        (
            "frontend-no-browser-dialogs",
            "frontend/App.tsx",
            "frontend-component",
            "const onAlert = () => setMessage('saved');\nmyDialog.confirm();\n",
        ),
        (
            "frontend-esm-imports",
            "frontend/App.tsx",
            "frontend-component",
            'import React from "https://esm.sh/react@18.2.0";\nimport { api } from "./api.ts";\n',
        ),
        (
            "backend-export-fetch",
            "backend/index.ts",
            "backend-route",
            "const app = new Hono();\nexport default app.fetch;\n",
        ),
        (
            "backend-no-serve-static",
            "backend/index.ts",
            "backend-route",
            'import { Hono } from "npm:hono";\nimport { serveFile } from "https://esm.town/v/std/utils";\n',
        ),
        (
            "backend-no-cors-middleware",
            "backend/routes/api.ts",
            "backend-route",
            'import { Hono } from "npm:hono";\n',
        ),
        (
            "backend-error-unwrap",
            "backend/index.ts",
            "backend-route",
            "app.onError((err, c) => { throw err; });\n",
        ),
        (
            "no-deno-kv",
            "backend/routes/store.ts",
            "backend-route",
            'import { sqlite } from "https://esm.town/v/stevekrouse/sqlite";\n',
        ),
        (
            "schema-versioned-tables",
            "backend/database/migrations.ts",
            "schema",
            "await sqlite.execute(`CREATE TABLE IF NOT EXISTS users_v2 (id INTEGER PRIMARY KEY)`);\n",
        ),
        (
            "config-no-inline-secrets",
            ".env.example",
            "config",
            "OPENAI_API_KEY=\nSESSION_SECRET=${SESSION_SECRET}\n",
        ),
    ],
)
def test_builtin_rule_passes_on_conforming_source(rule_id, path, role, content) -> None:
    assert _run(rule_id, path, role, content).passed


@pytest.mark.parametrize(
    ("rule_id", "path", "role", "content", "line"),
    [
        (
            "frontend-jsx-import-source",
            "frontend/App.tsx",
            "frontend-component",
            'import React from "https://esm.sh/react";\nexport function App() {}\n',
            1,
        ),
        (
            "frontend-no-browser-dialogs",
            "frontend/App.tsx",
            "frontend-component",
            "function save() {\n  window.alert('saved');\n}\n",
            2,
        ),
        (
            "frontend-esm-imports",
            "frontend/App.tsx",
            "frontend-component",
            '/** @jsxImportSource https://esm.sh/react */\nimport React from "react";\n',
            2,
        ),
        (
            "backend-export-fetch",
            "backend/index.ts",
            "backend-route",
            "const app = new Hono();\nDeno.serve(app.fetch);\n",
            None,
        ),
        (
            "backend-no-serve-static",
            "backend/index.ts",
            "backend-route",
            'import { Hono } from "npm:hono";\nimport {\n  serveStatic,\n} from "npm:hono/deno";\n',
            2,
        ),
        (
            "backend-no-cors-middleware",
            "backend/routes/api.ts",
            "backend-route",
            'import { cors } from "npm:hono/cors";\n',
            1,
        ),
        (
            "backend-error-unwrap",
            "backend/index.ts",
            "backend-route",
            "export default app.fetch;\n",
            None,
        ),
        (
            "no-deno-kv",
            "backend/routes/store.ts",
            "backend-route",
            "const kv = await Deno.openKv();\n",
            1,
        ),
        (
            "schema-versioned-tables",
            "backend/database/schema.sql",
            "schema",
            "-- schema\nCREATE TABLE IF NOT EXISTS users (id INTEGER PRIMARY KEY);\n",
            2,
        ),
        (
            "config-no-inline-secrets",
            "deno.json",
            "config",
            '{\n  "apiKey": "sk-live-0123456789abcdef"\n}\n',
            2,
        ),
    ],
)
def test_builtin_rule_fails_on_violation(rule_id, path, role, content, line) -> None:
    outcome = _run(rule_id, path, role, content)

    assert not outcome.passed
    assert outcome.message
    assert outcome.line == line


def test_entry_point_rules_only_target_backend_index() -> None:
    registry = default_registry()
    route = ClassifiedFile(path="backend/routes/users.ts", role="backend-route", content="")
    nested_entry = ClassifiedFile(path="apps/site/backend/index.tsx", role="backend-route", content="")

    assert not registry.get("backend-export-fetch").applies_to(route)
    assert registry.get("backend-export-fetch").applies_to(nested_entry)
    assert not registry.get("backend-error-unwrap").applies_to(route)
