import errno
import os

import pytest
from rich import inspect

from filesystem import LocalFilesystem, MemoryFilesystem, PosixFilesystem
from file_type_masks import S_IFDIR, S_IFLNK, S_IFREG
from posix_permissions import ALL_PERMISSIONS, permissions_from_string, permissions_to_mode


@pytest.fixture
def memfs() -> MemoryFilesystem:
    fs = MemoryFilesystem()
    fs.mkdir("/directory", 0o775)
    fs.create_file("/directory/file", 0o755)
    fs.symlink("file", "/directory/symlink")
    fs.symlink("/directory", "/dirlink")
    return fs


def test_implementations_satisfy_protocol(memfs: MemoryFilesystem):
    assert isinstance(memfs, PosixFilesystem)
    assert isinstance(LocalFilesystem(), PosixFilesystem)


def test_memory_entries(memfs: MemoryFilesystem):
    print(inspect(memfs))
    assert memfs.lstat_mode("/") == S_IFDIR | 0o755
    assert memfs.lstat_mode("/directory") == S_IFDIR | 0o775
    assert memfs.lstat_mode("directory/file") == S_IFREG | 0o755
    assert memfs.lstat_mode("/directory/symlink") == S_IFLNK | 0o777


def test_memory_paths_are_normalized(memfs: MemoryFilesystem):
    assert memfs.is_dir("directory/")
    assert memfs.is_dir("//directory/./")
    assert memfs.is_symlink("/directory/../directory/symlink")


def test_memory_is_symlink_does_not_follow(memfs: MemoryFilesystem):
    assert memfs.is_symlink("/directory/symlink")
    assert not memfs.is_symlink("/directory/file")
    assert not memfs.is_symlink("/missing")


def test_memory_is_dir_follows_symlinks(memfs: MemoryFilesystem):
    assert memfs.is_dir("/directory")
    assert memfs.is_dir("/dirlink")
    assert not memfs.is_dir("/directory/symlink")
    assert not memfs.is_dir("/missing")


def test_memory_dangling_and_looping_links(memfs: MemoryFilesystem):
    memfs.symlink("nowhere", "/dangling")
    memfs.symlink("/loop-b", "/loop-a")
    memfs.symlink("/loop-a", "/loop-b")
    assert memfs.is_symlink("/dangling")
    assert not memfs.is_dir("/dangling")
    assert not memfs.is_dir("/loop-a")
    with pytest.raises(OSError) as exc_info:
        memfs.chmod("/loop-a", ALL_PERMISSIONS)
    assert exc_info.value.errno == errno.ELOOP


def test_memory_permissions_do_not_follow(memfs: MemoryFilesystem):
    assert permissions_to_mode(memfs.posix_permissions("/directory/symlink")) == 0o777
    assert permissions_to_mode(memfs.posix_permissions("/directory/file")) == 0o755


def test_memory_chmod(memfs: MemoryFilesystem):
    memfs.chmod("/directory/symlink", permissions_from_string("rw-------"))
    assert memfs.lstat_mode("/directory/file") == S_IFREG | 0o600
    assert memfs.lstat_mode("/directory/symlink") == S_IFLNK | 0o777

    memfs.chmod("/directory/symlink", permissions_from_string("r--r--r--"), follow_symlinks=False)
    assert memfs.lstat_mode("/directory/symlink") == S_IFLNK | 0o444
    assert memfs.lstat_mode("/directory/file") == S_IFREG | 0o600


def test_memory_missing_path(memfs: MemoryFilesystem):
    with pytest.raises(FileNotFoundError) as exc_info:
        memfs.posix_permissions("/directory/missing")
    assert exc_info.value.errno == errno.ENOENT
    assert exc_info.value.filename == "/directory/missing"


def test_memory_create_errors(memfs: MemoryFilesystem):
    with pytest.raises(FileExistsError):
        memfs.mkdir("/directory")
    with pytest.raises(FileNotFoundError):
        memfs.create_file("/missing/file")
    with pytest.raises(NotADirectoryError):
        memfs.create_file("/directory/file/child")


def test_memory_remove(memfs: MemoryFilesystem):
    with pytest.raises(OSError) as exc_info:
        memfs.remove("/directory")
    assert exc_info.value.errno == errno.ENOTEMPTY
    with pytest.raises(PermissionError):
        memfs.remove("/")

    memfs.remove("/directory/symlink")
    memfs.remove("/directory/file")
    memfs.remove("/directory")
    assert not memfs.is_dir("/directory")
    with pytest.raises(FileNotFoundError):
        memfs.remove("/directory")


def test_memory_special_bits_are_dropped():
    fs = MemoryFilesystem()
    fs.create_file("/setuid", 0o4755)
    assert fs.lstat_mode("/setuid") == S_IFREG | 0o755


def test_local_filesystem(tmp_path):
    directory = tmp_path / "directory"
    directory.mkdir()
    os.chmod(directory, 0o750)
    target = directory / "file"
    target.write_text("content")
    os.chmod(target, 0o640)
    (directory / "symlink").symlink_to(target)

    fs = LocalFilesystem()
    assert permissions_to_mode(fs.posix_permissions(str(directory))) == 0o750
    assert permissions_to_mode(fs.posix_permissions(str(target))) == 0o640
    assert fs.is_dir(str(directory))
    assert not fs.is_dir(str(target))
    assert fs.is_symlink(str(directory / "symlink"))
    assert not fs.is_symlink(str(target))


def test_local_filesystem_with_root(tmp_path):
    (tmp_path / "sub").mkdir()
    fs = LocalFilesystem(root=str(tmp_path))
    assert fs.is_dir("/sub")
    assert fs.is_dir("sub")
    assert not fs.is_symlink("/sub")


def test_local_filesystem_errors_propagate(tmp_path):
    with pytest.raises(FileNotFoundError):
        LocalFilesystem().posix_permissions(str(tmp_path / "missing"))
