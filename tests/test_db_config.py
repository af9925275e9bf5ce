from __future__ import annotations

from src.class_attendance.class_attendance.database.bootstrap import iter_sql_statements
from src.class_attendance.class_attendance.database.connection import DBConfig, DatabaseConnection


def test_db_config_from_settings_fills_defaults():
    config = DBConfig.from_mapping({"host": "db", "port": "3307", "user": "app"})

    assert config == DBConfig(host="db", port=3307, user="app", password="", database="class_attendance")
    assert config.description == "app@db:3307/class_attendance"


def test_connect_kwargs_can_omit_database():
    kwargs = DBConfig().connect_kwargs(with_database=False)

    assert "database" not in kwargs
    assert kwargs["use_pure"] is True


def test_instance_is_replaced_when_config_changes():
    first = DatabaseConnection.get_instance(DBConfig(database="a"))

    assert DatabaseConnection.get_instance(DBConfig(database="a")) is first
    assert DatabaseConnection.get_instance(DBConfig(database="b")) is not first


def test_sql_split_ignores_semicolons_in_strings():
    sql = "INSERT INTO t VALUES ('a;b');\nCREATE TABLE x (id INT);"

    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", "CREATE TABLE x (id INT)"]
