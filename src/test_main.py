from database import create_database, store_data
from main import main
from models import Person, Relationship


def test_main_prints_layout_from_database(tmp_path, capsys) -> None:
    db_path = tmp_path / "tree.db"
    conn = create_database(db_path)
    store_data(
        conn,
        [Person(id="A", given_names="Ada"), Person(id="B", given_names="Ben")],
        [Relationship(id="r1", type="parent_child", person_id1="A", person_id2="B")],
    )
    conn.close()

    assert main([str(db_path), "--root", "B", "--padding", "10"]) == 0

    out = capsys.readouterr().out
    assert "Found 2 people and 1 relationships" in out
    assert "Chart size: 480 x 100" in out
    assert "Generation 0:" in out
    assert "Generation 1:" in out
    assert "No data issues found" in out
