"""Unit tests for SilkDecoder."""

from unittest.mock import patch

import pytest

from voice_ingest.audio.codec import DecodedAudio, SilkDecoder
from voice_ingest.audio.formats import SILK_MARKER
from voice_ingest.errors import CodecDecodeError

SILK_PAYLOAD = SILK_MARKER + b"\x0a\x00payload"


def fake_decode(pcm: bytes):
    def _decode(silk_in, pcm_out, sample_rate):
        fake_decode.seen = (silk_in.read(), sample_rate)
        pcm_out.write(pcm)
    return _decode


class TestSilkDecoder:
    """SILK decoding through pysilk."""

    def test_decode_standard_payload(self):
        decoder = SilkDecoder(sample_rate=24000)

        with patch("voice_ingest.audio.codec.pysilk.decode", side_effect=fake_decode(b"\x01\x00" * 24000)):
            decoded = decoder.decode(SILK_PAYLOAD)

        assert fake_decode.seen == (SILK_PAYLOAD, 24000)
        assert decoded.sample_rate == 24000
        assert decoded.channels == 1
        assert decoded.duration == pytest.approx(1.0)

    def test_qq_prefix_is_stripped(self):
        decoder = SilkDecoder()

        with patch("voice_ingest.audio.codec.pysilk.decode", side_effect=fake_decode(b"\x00\x00")):
            decoder.decode(b"\x02" + SILK_PAYLOAD)

        assert fake_decode.seen[0] == SILK_PAYLOAD

    def test_configured_rate_is_reported(self):
        """The rate handed to the decoder is the rate carried downstream."""
        decoder = SilkDecoder(sample_rate=16000)

        with patch("voice_ingest.audio.codec.pysilk.decode", side_effect=fake_decode(b"\x00\x00" * 100)):
            decoded = decoder.decode(SILK_PAYLOAD)

        assert fake_decode.seen[1] == 16000
        assert decoded.sample_rate == 16000

    def test_decoder_failure_is_fatal(self):
        decoder = SilkDecoder()

        with patch("voice_ingest.audio.codec.pysilk.decode", side_effect=ValueError("bad header")):
            with pytest.raises(CodecDecodeError) as exc_info:
                decoder.decode(SILK_PAYLOAD)

        assert "bad header" in str(exc_info.value)
        assert exc_info.value.stage == "decode"

    def test_empty_output_is_fatal(self):
        """A decoder that returns nothing must not yield silent audio."""
        decoder = SilkDecoder()

        with patch("voice_ingest.audio.codec.pysilk.decode", side_effect=fake_decode(b"")):
            with pytest.raises(CodecDecodeError):
                decoder.decode(SILK_PAYLOAD)

    @pytest.mark.asyncio
    async def test_decode_async_runs_decoder(self):
        decoder = SilkDecoder()

        with patch("voice_ingest.audio.codec.pysilk.decode", side_effect=fake_decode(b"\x00\x00" * 10)):
            decoded = await decoder.decode_async(SILK_PAYLOAD)

        assert isinstance(decoded, DecodedAudio)
        assert len(decoded.pcm) == 20


def test_strip_frame_prefix():
    assert SilkDecoder.strip_frame_prefix(b"\x02abc") == b"abc"
    assert SilkDecoder.strip_frame_prefix(b"abc") == b"abc"
    assert SilkDecoder.strip_frame_prefix(b"") == b""
