"""FileSystemClientRegistry 单元测试"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from ext.filesystem.client import FileSystemClient, FileSystemClientRegistry
from ext.filesystem.exceptions import (
    FileSystemConfigMissingError,
    FileSystemProviderInitError,
    FileSystemProviderTypeError,
)
from ext.filesystem.lookup import PropertiesLookup
from tests.ext.filesystem.fakes import CountingFactory, RecordingProvider


class TestRegistryCache:
    """测试客户端缓存"""

    def test_get_returns_cached_instance(self, counting_factory):
        """测试重复获取返回同一实例"""
        registry = FileSystemClientRegistry(PropertiesLookup(), factory=counting_factory)

        first = registry.get("public")
        second = registry.get("public")

        assert isinstance(first, FileSystemClient)
        assert first is second
        assert counting_factory.calls == ["public"]
        assert "public" in registry
        assert len(registry) == 1

    def test_different_identifiers(self, counting_factory):
        registry = FileSystemClientRegistry(PropertiesLookup(), factory=counting_factory)

        assert registry.get("a") is not registry.get("b")
        assert sorted(registry.identifiers()) == ["a", "b"]

    def test_concurrent_first_access(self):
        """测试并发首次访问只创建一次"""
        release = threading.Event()
        factory = CountingFactory(block_on={"public": release})
        registry = FileSystemClientRegistry(PropertiesLookup(), factory=factory)
        workers = 32
        barrier = threading.Barrier(workers)

        def worker():
            barrier.wait()
            return registry.get("public")

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(worker) for _ in range(workers)]
            # 等待所有线程进入后再放行 build
            threading.Timer(0.2, release.set).start()
            clients = [future.result(timeout=10) for future in futures]

        assert factory.calls == ["public"]
        assert all(client is clients[0] for client in clients)

    def test_unrelated_identifier_not_blocked(self):
        """测试某个标识符创建时不阻塞其他标识符"""
        release = threading.Event()
        factory = CountingFactory(block_on={"slow": release})
        registry = FileSystemClientRegistry(PropertiesLookup(), factory=factory)

        with ThreadPoolExecutor(max_workers=1) as executor:
            slow_future = executor.submit(registry.get, "slow")
            fast_client = registry.get("fast")
            assert fast_client.identifier == "fast"
            assert not slow_future.done()
            release.set()
            assert slow_future.result(timeout=10).identifier == "slow"

    def test_failed_construction_not_cached(self):
        """测试创建失败不写入缓存, 下次重新创建"""
        factory = CountingFactory(fail_times=1)
        registry = FileSystemClientRegistry(PropertiesLookup(), factory=factory)

        with pytest.raises(FileSystemProviderInitError):
            registry.get("archive")
        assert "archive" not in registry

        client = registry.get("archive")
        assert isinstance(client.provider, RecordingProvider)
        assert factory.calls == ["archive", "archive"]


class TestNamedClients:
    """测试 public / private 快捷访问"""

    def test_public_defaults_to_literal(self, counting_factory):
        """测试未配置 public.filesystem.id 时使用 public"""
        registry = FileSystemClientRegistry(PropertiesLookup(), factory=counting_factory)

        assert registry.public_id == "public"
        assert registry.get_public() is registry.get("public")
        assert counting_factory.calls == ["public"]

    def test_private_defaults_to_literal(self, counting_factory):
        registry = FileSystemClientRegistry(PropertiesLookup(), factory=counting_factory)

        assert registry.private_id == "private"
        assert registry.get_private() is registry.get("private")

    def test_configured_ids(self, counting_factory):
        """测试通过配置指定 public / private 标识符"""
        lookup = PropertiesLookup({"public.filesystem.id": "cdn", "private.filesystem.id": "vault"})
        registry = FileSystemClientRegistry(lookup, factory=counting_factory)

        assert registry.get_public().identifier == "cdn"
        assert registry.get_private().identifier == "vault"
        assert registry.get_public() is registry.get("cdn")
        assert counting_factory.calls == ["cdn", "vault"]


class TestRegistryWithFactory:
    """测试注册表使用默认工厂"""

    def test_missing_provider_config(self):
        registry = FileSystemClientRegistry(PropertiesLookup())
        with pytest.raises(FileSystemConfigMissingError):
            registry.get("public")
        assert len(registry) == 0

    def test_unknown_provider(self):
        registry = FileSystemClientRegistry(PropertiesLookup({"public.filesystem.provider": "unknown-kind"}))
        with pytest.raises(FileSystemProviderTypeError):
            registry.get("public")
        assert "public" not in registry

    def test_cache_population_logged(self, counting_factory, loguru_messages):
        registry = FileSystemClientRegistry(PropertiesLookup(), factory=counting_factory)

        registry.get("public")
        registry.get("public")

        assert loguru_messages.count("Cached filesystem client [public]") == 1
