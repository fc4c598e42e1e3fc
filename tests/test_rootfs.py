from cellguard.rootfs import ESSENTIAL_DIRS, prepare_rootfs


def test_creates_essential_dirs(tmp_path):
    target = tmp_path / "rootfs"
    prepare_rootfs([], target)
    for name in ["proc", "sys", "dev", "tmp", "etc", "var", "run"]:
        assert (target / name).is_dir()
    assert sorted(p.name for p in target.iterdir()) == sorted(ESSENTIAL_DIRS)


def test_copies_nested_layer(tmp_path):
    layer = tmp_path / "layer1"
    (layer / "usr" / "bin").mkdir(parents=True)
    (layer / "usr" / "bin" / "tool").write_text("binary")
    target = tmp_path / "rootfs"
    prepare_rootfs([layer], target)
    assert (target / "usr" / "bin" / "tool").read_text() == "binary"
    assert (layer / "usr" / "bin" / "tool").read_text() == "binary"


def test_later_layers_overwrite(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    (first / "etc").mkdir(parents=True)
    (second / "etc").mkdir(parents=True)
    (first / "etc" / "conf").write_text("old")
    (first / "etc" / "keep").write_text("kept")
    (second / "etc" / "conf").write_text("new")
    target = tmp_path / "rootfs"
    prepare_rootfs([first, second], target)
    assert (target / "etc" / "conf").read_text() == "new"
    assert (target / "etc" / "keep").read_text() == "kept"


def test_skips_missing_and_file_layers(tmp_path):
    not_a_dir = tmp_path / "layer.tar"
    not_a_dir.write_text("data")
    missing = tmp_path / "missing"
    target = tmp_path / "rootfs"
    prepare_rootfs([not_a_dir, missing], target)
    assert not (target / "layer.tar").exists()
    assert sorted(p.name for p in target.iterdir()) == sorted(ESSENTIAL_DIRS)


def test_existing_content_preserved(tmp_path):
    target = tmp_path / "rootfs"
    (target / "etc").mkdir(parents=True)
    (target / "etc" / "hosts").write_text("local")
    prepare_rootfs([], target)
    assert (target / "etc" / "hosts").read_text() == "local"