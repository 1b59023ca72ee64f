import shutil
import subprocess

import pytest

from batchconnect.app.repo import AppRepo


def test_missing_form_is_fatal(make_app):
    root = make_app({"form.yml": None})
    with pytest.raises(FileNotFoundError, match="form.yml"):
        AppRepo.from_path(root)


def test_missing_submit_template_is_fatal(make_app):
    root = make_app({"submit.yml.j2": None})
    with pytest.raises(FileNotFoundError, match="submit.yml.j2"):
        AppRepo.from_path(root)


def test_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError, match="App directory not found"):
        AppRepo.from_path(tmp_path / "nope")


def test_templated_form_is_rendered(make_app):
    root = make_app({
        "form.yml": None,
        "form.yml.j2": (
            "attributes:\n"
            "{% for q in ['a', 'b'] %}\n"
            "  q_{{ q }}:\n"
            "    value: {{ q }}\n"
            "{% endfor %}\n"
        ),
    })
    repo = AppRepo.from_path(root)
    assert repo.attributes == {"q_a": {"value": "a"}, "q_b": {"value": "b"}}


def test_form_without_attributes(make_app):
    repo = AppRepo.from_path(make_app({"form.yml": "form: []\n"}))
    assert repo.attributes == {}


def test_form_must_be_a_mapping(make_app):
    with pytest.raises(ValueError, match="mapping"):
        AppRepo.from_path(make_app({"form.yml": "- a\n- b\n"}))


def test_fragment_lookup_precedence(make_app):
    root = make_app({
        "template/before.sh.j2": "echo tpl-dir-j2\n",
        "before.sh.j2": "echo root-j2\n",
        "template/before.sh": "echo tpl-dir-plain\n",
        "script.sh": "echo root-plain\n",
        "template/script.sh": "echo tpl-dir-plain\n",
        "after.sh.j2": "echo root-j2\n",
        "template/after.sh": "echo tpl-dir-plain\n",
    }).resolve()
    repo = AppRepo.from_path(root)
    assert repo.fragments["before.sh"] == root / "template" / "before.sh.j2"
    assert repo.fragments["script.sh"] == root / "template" / "script.sh"
    assert repo.fragments["after.sh"] == root / "after.sh.j2"


def test_absent_fragment_renders_empty(make_app):
    repo = AppRepo.from_path(make_app())
    assert "after.sh" not in repo.fragments
    assert repo.render_fragment("after.sh", {}) == ""


def test_templated_fragment_sees_options_and_context(make_app):
    root = make_app({"template/script.sh.j2": "run {{ bc_queue }} {{ context.bc_queue }} [{{ missing }}]\n"})
    repo = AppRepo.from_path(root)
    assert repo.render_fragment("script.sh", {"bc_queue": "shared"}) == "run shared shared []\n"


def test_plain_fragment_is_not_rendered(make_app):
    root = make_app({"template/script.sh": "echo {{ not_jinja }}\n"})
    repo = AppRepo.from_path(root)
    assert repo.render_fragment("script.sh", {"not_jinja": "x"}) == "echo {{ not_jinja }}\n"


def test_render_submit_parses_yaml(make_app):
    root = make_app({"submit.yml.j2": "batch_connect:\n  native:\n    - \"-p {{ bc_queue }}\"\n"})
    repo = AppRepo.from_path(root)
    assert repo.render_submit({"bc_queue": "shared"}) == {"batch_connect": {"native": ["-p shared"]}}


def test_open_prefers_local_directory(make_app, monkeypatch):
    root = make_app()

    def boom(*a, **k):
        raise AssertionError("git must not be called for a local directory")

    monkeypatch.setattr(subprocess, "run", boom)
    assert AppRepo.open(str(root)).root == root.resolve()


def test_clone_invokes_shallow_git_clone(make_app, tmp_path, monkeypatch):
    src = make_app(name="upstream")
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        dest = cmd[-1]
        shutil.copytree(src, dest)
        return subprocess.CompletedProcess(cmd, 0, "", "")

    monkeypatch.setattr(subprocess, "run", fake_run)
    repo = AppRepo.clone("https://example.org/app.git", branch="dev", dest=tmp_path / "checkout")

    assert calls == [[
        "git", "clone", "--depth", "1", "--branch", "dev",
        "https://example.org/app.git", str(tmp_path / "checkout"),
    ]]
    assert repo.root == (tmp_path / "checkout").resolve()


def test_clone_failure_raises_runtime_error(tmp_path, monkeypatch):
    monkeypatch.setattr(
        subprocess, "run",
        lambda cmd, **k: subprocess.CompletedProcess(cmd, 128, "", "fatal: repository not found"),
    )
    with pytest.raises(RuntimeError, match="repository not found"):
        AppRepo.clone("https://example.org/missing.git", dest=tmp_path / "x")
