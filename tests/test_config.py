import json
import os

import pytest

from asdbatch.config import Config, Factory, ServiceConfig

SAMPLE = {
    "BENZ": {"MIDDLECONF": {"DMRSURL": "http://dmrs.example.com/"}, "TcrsURL": "http://tcrs.example.com/"},
    "TESLA": {"MIDDLECONF": {"DMRSURL": "dms.example.com:9000"}, "TcrsURL": "http://tesla.example.com/"},
    "DelaySecSKT": 100,
    "DelaySecKT": 200,
    "DelaySecLGUP": 300,
    "MaxMemberList": 50,
    "SKTProcess": True,
    "KTProcess": False,
    "LGUPProcess": True,
    "BenzProcess": True,
    "TeslaProcess": True,
    "LogerfilePath": "logs/asd",
}


def _write_config(directory, data):
    path = directory / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_service_config_from_dict():
    svc = ServiceConfig.from_dict(SAMPLE["BENZ"])
    assert svc.tcrs_url == "http://tcrs.example.com/"
    assert svc.dmrs_url == "http://dmrs.example.com/"


def test_config_from_dict_reads_all_fields():
    config = Config.from_dict(SAMPLE)
    assert config.delay_sec_skt == 100
    assert config.delay_sec_kt == 200
    assert config.delay_sec_lgup == 300
    assert config.max_member_list == 50
    assert config.skt_process and config.lgup_process and not config.kt_process
    assert config.logger_file_path == "logs/asd"
    assert config.tesla.tcrs_url == "http://tesla.example.com/"
    assert config.saturn == ServiceConfig()


def test_config_keys_match_without_case():
    assert Config.from_dict({"maxmemberlist": 7}).max_member_list == 7


@pytest.mark.parametrize("data", [{"MaxMemberList": "7"}, {"SKTProcess": 1}, {"BENZ": []}])
def test_config_rejects_wrong_types(data):
    with pytest.raises(ValueError):
        Config.from_dict(data)


def test_active_service_follows_priority_order():
    config = Config.from_dict(SAMPLE)
    assert config.active_service() == "Benz"
    assert config.service_config() == config.benz


def test_active_service_tesla_alone():
    config = Config(tesla_process=True, tesla=ServiceConfig(tcrs_url="t"))
    assert config.active_service() == "Tesla"
    assert config.service_config().tcrs_url == "t"


def test_no_active_service():
    config = Config()
    assert config.active_service() is None
    assert config.service_config() is None


def test_load_configuration_fills_config_and_map(tmp_path):
    path = _write_config(tmp_path, SAMPLE)
    factory = Factory(json_config_path=str(tmp_path) + os.sep)
    factory.load_configuration(str(path))
    assert factory.config_map == SAMPLE
    assert factory.config == Config.from_dict(SAMPLE)


def test_load_configuration_missing_file_keeps_defaults(tmp_path):
    factory = Factory()
    factory.load_configuration(str(tmp_path / "absent.json"))
    assert factory.config == Config()
    assert factory.config_map == {}


def test_load_configuration_live_downloads(tmp_path):
    source = _write_config(tmp_path, SAMPLE)
    conf_dir = tmp_path / "conf"
    factory = Factory(
        json_config_path=str(conf_dir) + os.sep,
        json_config_url=source.as_uri(),
        config_set="LIVE",
    )
    target = conf_dir / "config.json"
    factory.load_configuration(str(target))
    assert json.loads(target.read_text(encoding="utf-8")) == SAMPLE
    assert factory.config.max_member_list == SAMPLE["MaxMemberList"]


def test_initialize_opens_log_and_prints(tmp_path):
    data = dict(SAMPLE, LogerfilePath=str(tmp_path / "logs" / "asd"))
    _write_config(tmp_path, data)
    with Factory(json_config_path=str(tmp_path) + os.sep, host_name="host") as factory:
        factory.initialize()
        factory.print("hdr", "a", 1)
        log_file = tmp_path / "logs" / "asd_host.log"
        text = log_file.read_text(encoding="utf-8")
    assert "[REQUESTID][hdr][a 1]" in text
    assert factory.config.benz_process is True


def test_reload_config_uses_app_home(tmp_path, monkeypatch):
    _write_config(tmp_path, {"MaxMemberList": 9})
    monkeypatch.setenv("APP_HOME", str(tmp_path) + os.sep)
    factory = Factory()
    factory.reload_config()
    assert factory.config.max_member_list == 9


def test_reload_config_explicit_path(tmp_path):
    _write_config(tmp_path, {"KTProcess": True})
    factory = Factory()
    factory.reload_config(str(tmp_path) + os.sep)
    assert factory.config.kt_process is True
    assert factory.config_map == {"KTProcess": True}