"""Tests for view translation and view queries."""

import pytest

from molino_store.errors import NotFoundError, UnknownViewError
from molino_store.models import ViewOptions
from molino_store.store import (
    VIEW_DEFINITIONS,
    ViewName,
    build_design_document,
    resolve_view,
    collation_key,
    translate_view,
)

from .conftest import contract_doc, employee_doc


class TestTranslateView:
    """Pure translation of (view, options) into filters."""

    def test_exact_key(self):
        query = translate_view("documents-by-secondary-id", {"key": "123"})
        assert query.is_exact
        assert query.definition.doc_type == "empleado"
        assert query.definition.key_field == "nro_documento"
        assert query.key == "123"

    def test_start_key_alone_becomes_prefix_range(self):
        query = translate_view("documents-by-display-name", ViewOptions(start_key="Jua"))
        assert query.is_range
        assert query.start_key == "Jua"
        assert query.end_key == "Jua\uf8ff"

    def test_couchdb_option_spellings(self):
        query = translate_view("documents-by-display-name", {"startkey": "A", "endkey": "M"})
        assert (query.start_key, query.end_key) == ("A", "M")

    def test_no_options_scans_type(self):
        query = translate_view("children-by-parent-id")
        assert not query.is_exact and not query.is_range

    def test_legacy_names_resolve_to_same_definition(self):
        pairs = {
            "empleados_por_documento": ViewName.DOCUMENTS_BY_SECONDARY_ID,
            "empleados_por_nombre": ViewName.DOCUMENTS_BY_DISPLAY_NAME,
            "contratos_por_empleado": ViewName.CHILDREN_BY_PARENT_ID,
            "usuarios_sistema": ViewName.ACCOUNTS_BY_LOGIN_NAME,
            "usuarios_por_email": ViewName.ACCOUNTS_BY_EMAIL,
        }
        for legacy, canonical in pairs.items():
            assert resolve_view(legacy) is VIEW_DEFINITIONS[canonical]

    def test_unknown_view_is_not_found(self):
        with pytest.raises(UnknownViewError) as exc_info:
            translate_view("employees-by-salary")
        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.code == "unknown_view"

    def test_negative_limit_rejected(self):
        with pytest.raises(ValueError):
            translate_view("accounts-by-email", {"limit": -5})

    def test_design_document_publishes_every_view(self):
        design = build_design_document()
        assert design["_id"] == "_design/views"
        assert set(design["views"]) == {name.value for name in ViewName} | {"estadisticas_empleados"}
        assert design["views"]["estadisticas_empleados"]["reduce"] == "_sum"
        assert "emit(doc.nombre_apellido, null)" in design["views"]["documents-by-display-name"]["map"]
        assert "doc.estado)" in design["views"]["estadisticas_empleados"]["map"]

    def test_collation_orders_mixed_key_types(self):
        keys = ["b", 10, None, [1, "a"], True, 2.5, "a", False]
        assert sorted(keys, key=collation_key) == [None, False, True, 2.5, 10, "a", "b", [1, "a"]]


class TestViewQueries:
    """View queries evaluated by the in-memory backend."""

    @pytest.fixture
    async def populated(self, store):
        await store.insert({"id": "e1", **employee_doc("123", "Juan", "Perez")})
        await store.insert({"id": "e2", **employee_doc("456", "Maria", "Gonzalez")})
        await store.insert({"id": "e3", **employee_doc("789", "Juana", "Rios")})
        await store.insert({"id": "c1", **contract_doc("e1")})
        await store.insert({"id": "c2", **contract_doc("e1", estado="vencido")})
        await store.insert({"id": "c3", **contract_doc("e2")})
        await store.insert({"id": "u1", "type": "usuario", "username": "admin", "email": "admin@molino.test"})
        return store

    @pytest.mark.asyncio
    async def test_exact_lookup_by_secondary_id(self, populated):
        result = await populated.view("documents-by-secondary-id", {"key": "123"})
        assert [row.id for row in result.rows] == ["e1"]
        assert result.rows[0].key == "123"
        assert result.docs[0]["nombre"] == "Juan"

    @pytest.mark.asyncio
    async def test_prefix_search_by_display_name(self, populated):
        result = await populated.view("documents-by-display-name", {"start_key": "Jua"})
        names = [doc["nombre_apellido"] for doc in result.docs]
        assert names == ["Juan Perez", "Juana Rios"]
        assert "Maria Gonzalez" not in names

    @pytest.mark.asyncio
    async def test_children_by_parent(self, populated):
        result = await populated.view("contratos_por_empleado", {"key": "e1"})
        assert [row.id for row in result.rows] == ["c1", "c2"]
        assert all(doc["type"] == "contrato" for doc in result.docs)

    @pytest.mark.asyncio
    async def test_rows_are_ordered_by_key_then_id(self, populated):
        result = await populated.view("documents-by-display-name")
        assert [row.key for row in result.rows] == ["Juan Perez", "Juana Rios", "Maria Gonzalez"]

    @pytest.mark.asyncio
    async def test_limit(self, populated):
        result = await populated.view("documents-by-display-name", {"limit": 1})
        assert len(result.rows) == 1
        assert (await populated.view("documents-by-display-name", {"limit": 0})).rows == []

    @pytest.mark.asyncio
    async def test_accounts_by_login_and_email(self, populated):
        by_login = await populated.view("accounts-by-login-name", {"key": "admin"})
        by_email = await populated.view("usuarios_por_email", {"key": "admin@molino.test"})
        assert [row.id for row in by_login.rows] == ["u1"]
        assert [row.id for row in by_email.rows] == ["u1"]

    @pytest.mark.asyncio
    async def test_other_types_never_appear(self, populated):
        await populated.insert({"id": "x", "type": "contrato", "nro_documento": "123"})
        result = await populated.view("documents-by-secondary-id", {"key": "123"})
        assert [row.id for row in result.rows] == ["e1"]

    @pytest.mark.asyncio
    async def test_unknown_view_raises(self, populated):
        with pytest.raises(NotFoundError):
            await populated.view("no-such-view", {"key": "x"})

    @pytest.mark.asyncio
    async def test_exact_key_without_matches_is_empty(self, populated):
        result = await populated.view("documents-by-secondary-id", {"key": "000"})
        assert result.rows == []
        assert result.docs == []

    @pytest.mark.asyncio
    async def test_explicit_end_key_is_exclusive(self, populated):
        result = await populated.view(
            "documents-by-display-name", {"start_key": "Juan Perez", "end_key": "Maria Gonzalez"}
        )
        assert [row.key for row in result.rows] == ["Juan Perez", "Juana Rios"]

    @pytest.mark.asyncio
    async def test_mixed_key_types_sort_numbers_before_strings(self, populated):
        await populated.insert({"id": "e4", **employee_doc("000", "Legacy", "Import"), "nro_documento": 42})
        result = await populated.view("documents-by-secondary-id")
        assert [row.key for row in result.rows] == [42, "123", "456", "789"]
