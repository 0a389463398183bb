import logging

import pytest

from multialign.utils import PerformanceStats, setup_logging, timer


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("multialign")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "run.log"
    logger = setup_logging(logging.DEBUG, log_file)

    logging.getLogger("multialign.services.multi_aligner").info("Finished alignment")
    for handler in logger.handlers:
        handler.flush()

    assert "multialign.services.multi_aligner - INFO - Finished alignment" in log_file.read_text()

    # a second call replaces the handlers instead of stacking them
    setup_logging(logging.WARNING)
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_timer_collects_stats():
    stats = PerformanceStats()
    for _ in range(2):
        with timer("seeding", stats):
            pass
    with timer("local_search", stats):
        pass

    seeding = stats.get_stats("seeding")
    assert seeding.count == 2
    assert seeding.min_time <= seeding.avg_time <= seeding.max_time
    assert seeding.avg_time == seeding.total_time / 2
    assert set(stats.as_dict()) == {"seeding", "local_search"}

    # spread statistics only appear for repeated measurements
    assert "Count: 2, Avg:" in str(seeding)
    assert "Min:" not in str(stats.get_stats("local_search"))


def test_empty_report():
    assert PerformanceStats().report() == "No performance data collected"
    assert "No timing data" in str(PerformanceStats().get_stats("seeding"))
