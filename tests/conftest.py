"""
Shared fixtures: a throwaway SQLite database per test and dump file helpers.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

import db.models  # noqa: F401  registers all models on Base.metadata
from app.config import LegacyImportSettings
from db.base import Base
from db.session import create_session_factory

SCENARIO_DUMP = """\
-- MySQL dump 10.13  Distrib 5.7.33, for Linux (x86_64)
/*!40101 SET NAMES utf8 */;
DROP TABLE IF EXISTS `meter_site`;
CREATE TABLE `meter_site` (
  `site_id` int(11) NOT NULL AUTO_INCREMENT,
  `site_code` varchar(50) DEFAULT NULL,
  PRIMARY KEY (`site_id`)
) ENGINE=InnoDB DEFAULT CHARSET=latin1;
INSERT INTO `meter_site` (`site_id`, `site_code`, `site_name`, `date_modified`) VALUES (1,'SITE-01','Main Site','2019-03-04 10:00:00');
INSERT INTO `user_tb` (`user_id`, `user_name`, `user_real_name`, `user_password`) VALUES (1,'bob','Bob Smith',_binary 'x\\0y,z');
INSERT INTO `meter_rtu` (`rtu_id`, `rtu_sn_number`, `mac_addr`, `phone_no_or_ip_address`, `rtu_site_name`, `soft_rev`, `last_log_update`) VALUES (1,'GW-1','AA:BB','1.2.3.4','SITE-01','2.1','0000-00-00 00:00:00');
INSERT INTO `meter_details` (`meter_id`, `meter_name`, `meter_site_name`, `rtu_sn_number`, `meter_model`, `meter_name_addressable`, `meter_load_profile`, `meter_multiplier`, `meter_status`) VALUES (1,'M-1','SITE-01','GW-1','ION6200.cfg',1,'YES','0','INACTIVE');
INSERT INTO `meter_data` (`id`, `datetime`, `meter_id`, `location`, `vrms_a`, `freq`, `max_rec_kw_dmd`, `max_rec_kw_dmd_time`, `relay_status`) VALUES (1,'2020-01-01 00:15:00','M-1','Feeder A',230.5,60,12.5,'0000-00-00 00:00:00','1');
"""


class RecordingReporter:
    """
    In-memory progress reporter; cancels once ``cancel_after`` checks ran.
    """

    def __init__(self, cancel_after: int | None = None) -> None:
        self.reports: list[tuple[int, int, int]] = []
        self.checks = 0
        self._cancel_after = cancel_after

    def report(self, processed: int, total: int, errors: int) -> None:
        self.reports.append((processed, total, errors))

    def is_cancelled(self) -> bool:
        self.checks += 1
        return self._cancel_after is not None and self.checks >= self._cancel_after


@pytest.fixture()
def engine(tmp_path: Path) -> Iterator[Engine]:
    engine = create_engine(
        f"sqlite:///{tmp_path / 'import.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return create_session_factory(engine)


@pytest.fixture()
def import_settings() -> LegacyImportSettings:
    return LegacyImportSettings(progress_interval=2, reading_batch_size=2)


@pytest.fixture()
def write_dump(tmp_path: Path) -> Callable[..., Path]:
    def _write(content: str, name: str = "dump.sql", encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        path.write_bytes(content.encode(encoding))
        return path

    return _write


@pytest.fixture()
def scenario_dump(write_dump: Callable[..., Path]) -> Path:
    return write_dump(SCENARIO_DUMP)


@pytest.fixture()
def scenario_sql() -> str:
    return SCENARIO_DUMP


@pytest.fixture()
def make_reporter() -> Callable[..., RecordingReporter]:
    return RecordingReporter
