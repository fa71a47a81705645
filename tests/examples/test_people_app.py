from examples.people_app import list_people, rename_and_prune, run_demo, seed_sample_data
from microorm import SessionFactory


def test_people_example_seed_and_list(tmp_path):
    factory = SessionFactory.from_dsn(f"sqlite:///{tmp_path / 'people.db'}")
    seed_sample_data(factory)
    assert list_people(factory) == ["Ada Lovelace", "Alan Turing", "Grace Hopper"]

    rename_and_prune(factory, person_id=1, last_name="Byron")
    assert list_people(factory) == ["Ada Byron", "Alan Turing"]


def test_run_people_demo_returns_names(tmp_path):
    names = run_demo(f"sqlite:///{tmp_path / 'demo.db'}")
    assert names == ["Ada Lovelace", "Alan Renamed"]
