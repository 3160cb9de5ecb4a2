"""
Unit tests for the StudyDataService facade.

Tests:
- Per-tool project status
- Overall stats snapshot
- Export / reset / import round trip
- Construction from settings
"""

import json

from config import Settings
from src.study_data.models import SCHEMA_VERSION
from src.study_data.registry import TOPICS
from src.study_data.service import StudyDataService, ToolStatus
from src.study_data.storage import JSONFileStorage


class TestProjectStatus:
    """Tests for get_project_status."""

    def test_not_started(self, service):
        status = service.get_project_status("chain-maps")

        assert status.status is ToolStatus.NOT_STARTED
        assert status.total_attempts == 0
        assert status.accuracy is None
        assert status.last_used_at is None
        assert status.due_for_review_count == 0

    def test_in_progress_aggregates_across_topics(self, service, clock):
        service.record_result("chain-maps", "cardiac", 3, 4)
        clock.advance(hours=2)
        service.record_result("chain-maps", "oxygenation", 4, 6)
        service.record_result("quiz-prep", "cardiac", 0, 10)

        status = service.get_project_status("chain-maps")

        assert status.status is ToolStatus.IN_PROGRESS
        assert status.total_attempts == 10
        assert status.accuracy == 70
        assert status.last_used_at == clock.now

    def test_items_due_counts_only_own_prefix(self, service, clock):
        service.record_result("chain-maps", "cardiac", 3, 4)
        service.track_exposure("chain-maps:map-1", False)
        service.track_exposure("chain-maps:map-2", False)
        service.track_exposure("chain-maps-extra:map-3", False)
        clock.advance(days=1)

        status = service.get_project_status("chain-maps")

        assert status.status is ToolStatus.ITEMS_DUE
        assert status.due_for_review_count == 2
        assert status.to_dict()["status"] == "items-due"

    def test_due_items_without_attempts_is_not_started(self, service, clock):
        service.track_exposure("chain-maps:map-1", False)
        clock.advance(days=1)

        status = service.get_project_status("chain-maps")

        assert status.status is ToolStatus.NOT_STARTED
        assert status.due_for_review_count == 1


class TestOverallStats:
    """Tests for get_overall_stats."""

    def test_empty_store(self, service):
        stats = service.get_overall_stats()

        assert stats.total_attempts == 0
        assert stats.accuracy is None
        assert stats.concept_scores == {topic: None for topic in TOPICS}
        assert stats.weaknesses == []
        assert stats.streak == 0
        assert stats.exposure_count == 0
        assert stats.due_items_count == 0
        assert stats.dosage_stats.total_attempts == 0
        assert stats.wrong_answer_stats.total == 0

    def test_combines_every_engine(self, service, clock):
        service.record_result("chain-maps", "cardiac", 1, 4)
        service.record_result("quiz-prep", "oxygenation", 9, 10)
        service.track_exposure("chain-maps:map-1", False)
        service.track_exposure("chain-maps:map-2", True)
        service.record_dosage_quiz(10, 10)
        service.add_wrong_answer({"stem": "Q", "errorType": "misread"})
        clock.advance(days=1)

        stats = service.get_overall_stats()

        assert stats.total_attempts == 14
        assert stats.accuracy == 71
        assert stats.concept_scores["cardiac"] == 25
        assert stats.concept_scores["oxygenation"] == 90
        assert stats.concept_scores["emergency-disaster"] is None
        assert [w.topic for w in stats.weaknesses] == ["cardiac"]
        assert stats.streak == 1
        assert stats.exposure_count == 2
        assert stats.due_items_count == 1
        assert stats.dosage_stats.streak == 1
        assert stats.wrong_answer_stats.due_for_retest_count == 1

    def test_to_dict_is_json_serializable(self, service):
        service.record_result("chain-maps", "cardiac", 1, 4)
        service.record_dosage_quiz(9, 10)

        data = service.get_overall_stats().to_dict()

        json.dumps(data)
        assert data["weaknesses"][0]["topic"] == "cardiac"


class TestExportImport:
    """Tests for export / reset / import through the facade."""

    def _populate(self, service, clock):
        service.record_result("chain-maps", "cardiac", 1, 4, details={"map": "preload"})
        service.record_result("quiz-prep", "oxygenation", 9, 10)
        service.track_exposure("chain-maps:map-1", False)
        service.record_dosage_quiz(9, 10)
        wrong = service.add_wrong_answer({"stem": "Q", "source": "lecture"})
        clock.advance(days=1)
        service.retest_wrong_answer(wrong.id, True)
        service.record_result("chain-maps", "cardiac", 2, 2)

    def test_round_trip_restores_overall_stats(self, service, clock):
        self._populate(service, clock)
        before = service.get_overall_stats()
        exported = service.export_data()

        service.reset_all()
        assert service.get_overall_stats() != before

        assert service.import_data(exported) is True
        assert service.get_overall_stats() == before

    def test_export_keeps_wire_field_names(self, service, clock):
        self._populate(service, clock)

        data = json.loads(service.export_data())

        assert data["version"] == SCHEMA_VERSION
        assert data["exposure"]["chain-maps:map-1"]["lastSeenAt"] == clock.now - 24 * 60 * 60 * 1000
        assert data["wrongAnswerLog"][0]["retestHistory"][0]["wasCorrect"] is True
        assert data["sessions"][0]["details"] == {"map": "preload"}
        assert data["dosageStreak"]["recentScores"][0]["percent"] == 90

    def test_rejected_import_keeps_data(self, service):
        service.record_result("chain-maps", "cardiac", 1, 4)

        assert service.import_data('{"no": "version"}') is False
        assert service.get_concept_score("cardiac") == 25

    def test_reset_all_returns_fresh_document(self, service):
        service.record_result("chain-maps", "cardiac", 1, 4)

        document = service.reset_all()

        assert document.performance == {}
        assert service.get_concept_score("cardiac") is None


def test_from_settings_uses_configured_directory(tmp_path, clock):
    settings = Settings(
        study_data_dir=tmp_path,
        study_data_storage_key="progress",
        daily_review_size=4,
    )

    service = StudyDataService.from_settings(settings, clock=clock)
    service.record_result("chain-maps", "cardiac", 1, 1)

    assert isinstance(service.store.backend, JSONFileStorage)
    assert (tmp_path / "progress.json").exists()
    assert settings.get_storage_path() == tmp_path / "progress.json"
    assert service.daily_review.size == 4
