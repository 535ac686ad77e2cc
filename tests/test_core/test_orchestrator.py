"""Tests for the cache orchestrator."""

import asyncio
import io

import pytest
from PIL import Image

from imgcache.core import CacheOrchestrator
from imgcache.errors.exceptions import (
    DestinationExists,
    InvalidDirectory,
    InvalidRequestPath,
    InvalidTransformParameters,
    NotAFile,
    SignatureMismatch,
    TransformEngineFailure,
)
from imgcache.transforms.engine import PillowTransformEngine
from imgcache.types import Operation


class TestPassthrough:
    async def test_copies_master_file(self, source_dir, cache_dir, master_jpeg):
        outcome = await CacheOrchestrator().cache_image(source_dir, cache_dir, "test.jpg")
        assert outcome.succeeded
        assert outcome.error is None
        assert outcome.destination == cache_dir / "test.jpg"
        assert (cache_dir / "test.jpg").read_bytes() == master_jpeg.read_bytes()

    async def test_minimal_signature_file(self, source_dir, cache_dir):
        (source_dir / "tiny.jpg").write_bytes(b"\xff\xd8arbitrary bytes")
        outcome = await CacheOrchestrator().cache_image(source_dir, cache_dir, "tiny.jpg")
        assert outcome.succeeded
        assert (cache_dir / "tiny.jpg").read_bytes() == b"\xff\xd8arbitrary bytes"

    async def test_small_chunks(self, source_dir, cache_dir, master_jpeg):
        orchestrator = CacheOrchestrator(chunk_size=7)
        outcome = await orchestrator.cache_image(source_dir, cache_dir, "test.jpg")
        assert outcome.succeeded
        assert (cache_dir / "test.jpg").read_bytes() == master_jpeg.read_bytes()

    async def test_leading_slash_stripped(self, source_dir, cache_dir, master_jpeg):
        outcome = await CacheOrchestrator().cache_image(source_dir, cache_dir, "/test.jpg")
        assert outcome.succeeded
        assert (cache_dir / "test.jpg").exists()

    async def test_nested_path(self, source_dir, cache_dir, jpeg_bytes):
        (source_dir / "albums").mkdir()
        (source_dir / "albums" / "a.jpg").write_bytes(jpeg_bytes)
        outcome = await CacheOrchestrator().cache_image(source_dir, cache_dir, "albums/a.jpg")
        assert outcome.succeeded
        assert (cache_dir / "albums" / "a.jpg").read_bytes() == jpeg_bytes

    async def test_nested_path_without_create_parents(self, source_dir, cache_dir, jpeg_bytes):
        (source_dir / "albums").mkdir()
        (source_dir / "albums" / "a.jpg").write_bytes(jpeg_bytes)
        orchestrator = CacheOrchestrator(create_parents=False)
        outcome = await orchestrator.cache_image(source_dir, cache_dir, "albums/a.jpg")
        assert not outcome.succeeded
        assert not (cache_dir / "albums").exists()

    async def test_missing_master_file(self, source_dir, cache_dir):
        outcome = await CacheOrchestrator().cache_image(source_dir, cache_dir, "noexists")
        assert not outcome.succeeded
        assert isinstance(outcome.error, NotAFile)
        assert list(cache_dir.iterdir()) == []

    async def test_not_a_jpeg(self, source_dir, cache_dir):
        (source_dir / "fake.jpg").write_bytes(b"GIF89a")
        outcome = await CacheOrchestrator().cache_image(source_dir, cache_dir, "fake.jpg")
        assert isinstance(outcome.error, SignatureMismatch)
        assert list(cache_dir.iterdir()) == []

    async def test_existing_destination(self, source_dir, cache_dir, master_jpeg):
        (cache_dir / "test.jpg").write_bytes(b"already here")
        outcome = await CacheOrchestrator().cache_image(source_dir, cache_dir, "test.jpg")
        assert isinstance(outcome.error, DestinationExists)
        assert (cache_dir / "test.jpg").read_bytes() == b"already here"


class TestTransform:
    async def test_invokes_engine_with_decoded_transform(
        self, source_dir, cache_dir, master_jpeg, recording_engine
    ):
        orchestrator = CacheOrchestrator(engine=recording_engine)
        outcome = await orchestrator.cache_image(source_dir, cache_dir, "200x200_crop_test.jpg")
        assert outcome.succeeded
        assert recording_engine.calls == [(master_jpeg, Operation.CROP, 200, 200)]
        assert (cache_dir / "200x200_crop_test.jpg").read_bytes() == recording_engine.payload

    async def test_resize_with_pillow(self, source_dir, cache_dir, master_jpeg):
        outcome = await CacheOrchestrator().cache_image(
            source_dir, cache_dir, "100x100_resize_test.jpg"
        )
        assert outcome.succeeded
        img = Image.open(io.BytesIO((cache_dir / "100x100_resize_test.jpg").read_bytes()))
        # 64x48 master scaled to fit 100x100
        assert img.size == (100, 75)

    async def test_crop_with_pillow(self, source_dir, cache_dir, master_jpeg):
        outcome = await CacheOrchestrator().cache_image(
            source_dir, cache_dir, "/200x200_crop_test.jpg"
        )
        assert outcome.succeeded
        img = Image.open(cache_dir / "200x200_crop_test.jpg")
        assert img.size == (200, 200)

    async def test_missing_original(self, source_dir, cache_dir, recording_engine):
        orchestrator = CacheOrchestrator(engine=recording_engine)
        outcome = await orchestrator.cache_image(
            source_dir, cache_dir, "200x200_resize_badtest.jpg"
        )
        assert isinstance(outcome.error, NotAFile)
        assert recording_engine.calls == []
        assert list(cache_dir.iterdir()) == []

    async def test_original_not_a_jpeg(self, source_dir, cache_dir, recording_engine):
        (source_dir / "badtest.jpg").write_bytes(b"\x00\x00not an image")
        orchestrator = CacheOrchestrator(engine=recording_engine)
        outcome = await orchestrator.cache_image(
            source_dir, cache_dir, "200x200_resize_badtest.jpg"
        )
        assert isinstance(outcome.error, SignatureMismatch)
        assert recording_engine.calls == []

    async def test_zero_dimensions(self, source_dir, cache_dir, master_jpeg, recording_engine):
        orchestrator = CacheOrchestrator(engine=recording_engine)
        outcome = await orchestrator.cache_image(source_dir, cache_dir, "0x10_crop_test.jpg")
        assert isinstance(outcome.error, InvalidTransformParameters)
        assert recording_engine.calls == []
        assert list(cache_dir.iterdir()) == []

    async def test_overlong_dimensions(self, source_dir, cache_dir, master_jpeg, recording_engine):
        orchestrator = CacheOrchestrator(engine=recording_engine)
        outcome = await orchestrator.cache_image(
            source_dir, cache_dir, "1" * 5000 + "x10_crop_test.jpg"
        )
        assert not outcome.succeeded
        assert isinstance(outcome.error, InvalidTransformParameters)
        assert recording_engine.calls == []
        assert list(cache_dir.iterdir()) == []

    async def test_non_ascii_digits_are_passthrough(self, source_dir, cache_dir, master_jpeg):
        outcome = await CacheOrchestrator().cache_image(
            source_dir, cache_dir, "\uff12\uff10\uff10x200_crop_test.jpg"
        )
        assert isinstance(outcome.error, NotAFile)

    async def test_engine_failure_leaves_no_file(
        self, source_dir, cache_dir, master_jpeg, engine_factory
    ):
        engine = engine_factory(error=RuntimeError("boom"))
        outcome = await CacheOrchestrator(engine=engine).cache_image(
            source_dir, cache_dir, "50x50_crop_test.jpg"
        )
        assert isinstance(outcome.error, TransformEngineFailure)
        assert list(cache_dir.iterdir()) == []

    async def test_oversized_request_bounded_by_engine(self, source_dir, cache_dir, master_jpeg):
        orchestrator = CacheOrchestrator(engine=PillowTransformEngine(max_dimension=1000))
        outcome = await orchestrator.cache_image(
            source_dir, cache_dir, "99999x99999_resize_test.jpg"
        )
        assert isinstance(outcome.error, TransformEngineFailure)
        assert list(cache_dir.iterdir()) == []


class TestDirectoryValidation:
    async def test_invalid_source(self, tmp_path, cache_dir):
        outcome = await CacheOrchestrator().cache_image(tmp_path / "nope", cache_dir, "test.jpg")
        assert isinstance(outcome.error, InvalidDirectory)
        assert outcome.error.role == "source"
        assert "Master directory" in str(outcome.error)

    async def test_invalid_destination(self, source_dir, tmp_path, master_jpeg):
        outcome = await CacheOrchestrator().cache_image(source_dir, tmp_path / "nope", "test.jpg")
        assert isinstance(outcome.error, InvalidDirectory)
        assert outcome.error.role == "destination"

    async def test_empty_directory_string(self, source_dir, master_jpeg):
        outcome = await CacheOrchestrator().cache_image(source_dir, "", "test.jpg")
        assert isinstance(outcome.error, InvalidDirectory)
        assert outcome.error.role == "destination"

    async def test_file_is_not_a_directory(self, source_dir, master_jpeg):
        outcome = await CacheOrchestrator().cache_image(source_dir, master_jpeg, "test.jpg")
        assert isinstance(outcome.error, InvalidDirectory)

    async def test_existing_directories_pass(self, source_dir, cache_dir, master_jpeg):
        # Both roots exist, so only the request itself decides the outcome
        outcome = await CacheOrchestrator().cache_image(str(source_dir), str(cache_dir), "test.jpg")
        assert outcome.succeeded


class TestRequestPaths:
    @pytest.mark.parametrize("filename", ["", "/", "//"])
    async def test_empty_name(self, source_dir, cache_dir, filename):
        outcome = await CacheOrchestrator().cache_image(source_dir, cache_dir, filename)
        assert isinstance(outcome.error, InvalidRequestPath)

    async def test_traversal_out_of_cache(self, source_dir, cache_dir, tmp_path, jpeg_bytes):
        (tmp_path / "secret.jpg").write_bytes(jpeg_bytes)
        outcome = await CacheOrchestrator().cache_image(source_dir, cache_dir, "../secret.jpg")
        assert isinstance(outcome.error, InvalidRequestPath)

    async def test_traversal_out_of_master(self, source_dir, cache_dir, tmp_path, jpeg_bytes):
        (tmp_path / "secret.jpg").write_bytes(jpeg_bytes)
        outcome = await CacheOrchestrator().cache_image(
            source_dir, cache_dir, "10x10_crop_../secret.jpg"
        )
        assert isinstance(outcome.error, InvalidRequestPath)
        assert list(cache_dir.iterdir()) == []


class TestConcurrency:
    async def test_same_destination_single_winner(self, source_dir, cache_dir, jpeg_factory):
        data = jpeg_factory(256, 256)
        (source_dir / "test.jpg").write_bytes(data)
        orchestrator = CacheOrchestrator(chunk_size=512)

        outcomes = await asyncio.gather(
            orchestrator.cache_image(source_dir, cache_dir, "test.jpg"),
            orchestrator.cache_image(source_dir, cache_dir, "test.jpg"),
        )

        winners = [o for o in outcomes if o.succeeded]
        losers = [o for o in outcomes if not o.succeeded]
        assert len(winners) == 1
        assert len(losers) == 1
        assert isinstance(losers[0].error, DestinationExists)
        assert (cache_dir / "test.jpg").read_bytes() == data

    async def test_different_destinations_independent(
        self, source_dir, cache_dir, master_jpeg, recording_engine
    ):
        orchestrator = CacheOrchestrator(engine=recording_engine)
        names = ["test.jpg", "10x10_crop_test.jpg", "20x20_resize_test.jpg"]
        outcomes = await asyncio.gather(
            *(orchestrator.cache_image(source_dir, cache_dir, n) for n in names)
        )
        assert all(o.succeeded for o in outcomes)
        assert sorted(p.name for p in cache_dir.iterdir()) == sorted(names)


class TestFromConfig:
    def test_from_dict(self):
        orchestrator = CacheOrchestrator.from_config(
            {"jpeg_quality": 50, "max_dimension": 300, "unrelated": "ignored"}
        )
        assert isinstance(orchestrator.invoker.engine, PillowTransformEngine)

    def test_injected_engine_wins(self, recording_engine):
        orchestrator = CacheOrchestrator.from_config({}, engine=recording_engine)
        assert orchestrator.invoker.engine is recording_engine

    async def test_config_applied(self, source_dir, cache_dir, master_jpeg):
        orchestrator = CacheOrchestrator.from_config({"max_dimension": 50})
        outcome = await orchestrator.cache_image(source_dir, cache_dir, "60x10_resize_test.jpg")
        assert isinstance(outcome.error, TransformEngineFailure)
