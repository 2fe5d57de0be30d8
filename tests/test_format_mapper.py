"""Tests for quality ranking and format descriptor mapping."""

from __future__ import annotations

from backend.tube_api.youtube.format_mapper import (
    UNKNOWN_QUALITY_RANK,
    map_audio_format,
    map_download_format,
    map_tagged_format,
    map_video_format,
    mime_type,
    quality_rank,
    sort_by_quality,
    track_type,
    video_quality_label,
)


def _fmt(info: dict, format_id: str) -> dict:
    return next(f for f in info["formats"] if f["format_id"] == format_id)


class TestQualityRanking:
    def test_known_tiers(self):
        assert quality_rank("2160p") > quality_rank("1440p") > quality_rank("1080p")
        assert quality_rank("1080p") > quality_rank("720p") > quality_rank("480p") > quality_rank("360p")

    def test_unknown_labels_rank_below_360p(self):
        for label in ("240p", "144p", "unknown", "128kbps", None):
            assert quality_rank(label) == UNKNOWN_QUALITY_RANK
            assert quality_rank(label) < quality_rank("360p")

    def test_sort_descending(self):
        """
        GIVEN descriptors labelled 360p, 1080p, unknown, 2160p
        WHEN sorted by quality
        THEN the order is 2160p, 1080p, 360p, unknown
        """
        descriptors = [{"quality": q} for q in ("360p", "1080p", "unknown", "2160p")]
        ordered = [d["quality"] for d in sort_by_quality(descriptors)]
        assert ordered == ["2160p", "1080p", "360p", "unknown"]

    def test_sort_is_stable_for_equal_tiers(self):
        descriptors = [
            {"quality": "720p", "itag": 22},
            {"quality": "130kbps", "itag": 140},
            {"quality": "720p", "itag": 136},
            {"quality": "135kbps", "itag": 251},
        ]
        ordered = [d["itag"] for d in sort_by_quality(descriptors)]
        assert ordered == [22, 136, 140, 251]

    def test_sort_does_not_mutate_input(self):
        descriptors = [{"quality": "360p"}, {"quality": "720p"}]
        sort_by_quality(descriptors)
        assert [d["quality"] for d in descriptors] == ["360p", "720p"]


class TestLabels:
    def test_vertical_video_uses_short_side(self):
        assert video_quality_label({"width": 1080, "height": 1920}) == "1080p"

    def test_height_only(self):
        assert video_quality_label({"height": 480}) == "480p"

    def test_falls_back_to_note(self):
        assert video_quality_label({"format_note": "premium"}) == "premium"
        assert video_quality_label({}) == "unknown"

    def test_track_type(self, sample_info):
        assert track_type(_fmt(sample_info, "18")) == "video"
        assert track_type(_fmt(sample_info, "140")) == "audio"
        assert track_type(_fmt(sample_info, "137")) == "video-only"

    def test_mime_type(self, sample_info):
        assert mime_type(_fmt(sample_info, "140")) == 'audio/m4a; codecs="mp4a.40.2"'
        assert mime_type(_fmt(sample_info, "18")) == 'video/mp4; codecs="avc1.42001E, mp4a.40.2"'
        assert mime_type({}) is None


class TestMapping:
    def test_audio_format(self, sample_info):
        result = map_audio_format(_fmt(sample_info, "140"))
        assert result == {
            "itag": 140,
            "type": "audio",
            "quality": "130kbps",
            "container": "m4a",
            "size": 3_433_514,
            "bitrate": 129_500,
        }

    def test_video_format(self, sample_info):
        result = map_video_format(_fmt(sample_info, "18"))
        assert result["itag"] == 18
        assert result["type"] == "video"
        assert result["quality"] == "360p"
        assert result["container"] == "mp4"
        assert result["size"] == 13_000_000
        assert result["fps"] == 25
        assert result["resolution"] == "640x360"

    def test_missing_size_is_none(self, sample_info):
        assert map_video_format(_fmt(sample_info, "22"))["size"] is None

    def test_non_numeric_itag_kept_as_string(self):
        assert map_audio_format({"format_id": "hls-128", "abr": 128})["itag"] == "hls-128"

    def test_tagged_format(self, sample_info):
        result = map_tagged_format(_fmt(sample_info, "137"))
        assert result["type"] == "video-only"
        assert result["quality"] == "1080p"
        assert result["sizeFormatted"] == "76.29 MB"
        assert result["audioBitrate"] is None

        audio = map_tagged_format(_fmt(sample_info, "251"))
        assert audio["type"] == "audio"
        assert audio["resolution"] is None
        assert audio["audioBitrate"] == 135

    def test_download_format(self, sample_info):
        audio = map_download_format(_fmt(sample_info, "251"), audio=True)
        assert audio["format"] == "mp3"
        assert audio["url"].endswith("itag=251")
        assert "fps" not in audio

        video = map_download_format(_fmt(sample_info, "22"), audio=False)
        assert video["format"] == "mp4"
        assert video["quality"] == "720p"
        assert video["bitrate"] == 1_200_000
