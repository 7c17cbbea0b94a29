"""
Tests for the disk-backed source transformer.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from ssr_runtime.graph.module_graph import ModuleGraph
from ssr_runtime.transform.source_transformer import SourceTransformer


@pytest.fixture
def project(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.py").write_text("__ssr_exports__['x'] = 1\n", encoding="utf-8")
    return tmp_path


class TestSourceTransformer:
    @pytest.mark.asyncio
    async def test_reads_source_and_caches_on_record(self, project):
        graph = ModuleGraph(str(project))
        transformer = SourceTransformer(graph)

        result = await transformer.transform_request("/src/a.py")

        assert result.code == "__ssr_exports__['x'] = 1\n"
        assert result.file == str(project / "src" / "a.py")
        assert graph.get_module_by_url("/src/a.py").ssr_transform_result is result

    @pytest.mark.asyncio
    async def test_non_ssr_request_not_cached(self, project):
        graph = ModuleGraph(str(project))
        transformer = SourceTransformer(graph)

        result = await transformer.transform_request("/src/a.py", ssr=False)

        assert result is not None
        assert graph.get_module_by_url("/src/a.py").ssr_transform_result is None

    @pytest.mark.asyncio
    async def test_missing_file_returns_none(self, project):
        transformer = SourceTransformer(ModuleGraph(str(project)))

        assert await transformer.transform_request("/src/missing.py") is None

    @pytest.mark.asyncio
    async def test_uses_io_executor(self, project):
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="test-io")
        try:
            transformer = SourceTransformer(ModuleGraph(str(project)), io_executor=executor)
            result = await transformer.transform_request("/src/a.py")
        finally:
            executor.shutdown(wait=True)

        assert "__ssr_exports__" in result.code
