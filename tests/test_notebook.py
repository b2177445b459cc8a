from lingospark.notebook import Notebook

from conftest import make_word


def test_new_notebook_is_empty():
    notebook = Notebook()
    assert len(notebook) == 0
    assert notebook.words == []


def test_save_puts_newest_first():
    notebook = Notebook()
    notebook.save(make_word("1", "uno"))
    notebook.save(make_word("2", "dos"))
    notebook.save(make_word("3", "tres"))
    assert [w.original_text for w in notebook] == ["tres", "dos", "uno"]


def test_duplicate_id_is_ignored_even_with_new_content():
    notebook = Notebook()
    assert notebook.save(make_word("1", "uno"))
    assert not notebook.save(make_word("1", "otro"))
    assert len(notebook) == 1
    assert notebook.get("1").original_text == "uno"


def test_delete_and_membership():
    notebook = Notebook()
    notebook.save(make_word("1"))
    notebook.save(make_word("2"))

    assert notebook.contains("1")
    assert notebook.delete("1")
    assert not notebook.contains("1")
    assert notebook.get("1") is None
    assert not notebook.delete("1")
    assert [w.id for w in notebook] == ["2"]


def test_words_is_a_snapshot():
    notebook = Notebook()
    notebook.save(make_word("1"))
    snapshot = notebook.words
    snapshot.clear()
    assert len(notebook) == 1
