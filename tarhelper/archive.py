# Copyright 2026 The Bazel Authors. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Archive a directory tree into a tar stream."""

import logging
import os
import posixpath
import tarfile

from tarhelper import compression as compression_lib
from tarhelper import exclude
from tarhelper import file_info
from tarhelper import links
from tarhelper.compression import Compression
from tarhelper.file_info import FileKind

logger = logging.getLogger(__name__)


class TreeArchiver(object):
  """Writes the contents of a directory tree to a tar stream.

  The standard usage is:

    with open('out.tgz', 'wb') as out:
      archiver = TreeArchiver(out, '/tmp/build', compression=Compression.GZIP)
      archiver.exclude_path('*.o')
      archiver.archive()

  Directories, symlinks, regular files (with hard links detected) and devices
  are archived. Sockets and other special files are skipped.

  Entries are written in the order the directory listings return them, each
  directory before its contents. Names are prefixed with './' and directory
  names end with '/'.
  """

  def __init__(self,
               dest,
               target,
               compression=Compression.NONE,
               include_permissions=True,
               include_owners=False,
               excluded_paths=None,
               virtual_path='',
               defaults=file_info.DEFAULTS):
    """Configures an archive run.

    Args:
      dest: writable binary file object receiving the archive. It is not
          closed by the archiver.
      target: the directory to archive.
      compression: a Compression value selecting the output framing.
      include_permissions: if true, keep the mode bits found on disk,
          otherwise use the modes from `defaults`.
      include_owners: if true, keep the uid/gid found on disk, otherwise use
          the uid/gid from `defaults`.
      excluded_paths: glob patterns of paths to leave out, relative to
          `target`. Matched against the whole relative path and its last
          component.
      virtual_path: prefix prepended to every name in the archive, so that
          /tmp/build/bin/foo can be stored as ./var/lib/build/bin/foo.
      defaults: file_info.ArchiveDefaults used when modes or owners are not
          preserved.
    """
    self.dest = dest
    self.target = target
    self.compression = compression
    self.include_permissions = include_permissions
    self.include_owners = include_owners
    self.excluded_paths = []
    for name in excluded_paths or ():
      self.exclude_path(name)
    self.virtual_path = virtual_path
    self.defaults = defaults
    # Lives for the whole run, keyed by (st_dev, st_ino).
    self.hard_links = links.HardLinkTracker()

  def exclude_path(self, name):
    """Excludes a path, file or pattern relative to the archived tree."""
    self.excluded_paths.append(exclude.normalize_pattern(name))

  def archive(self):
    """Writes the whole tree to `dest`.

    The tar encoder is closed before the compressor. If anything fails, the
    end-of-archive marker is not written and the error propagates; bytes
    already sent to `dest` are left there.

    Raises:
      CompressionError: if the compression mode cannot be used for writing.
          Nothing is written in that case.
      OSError: if a file of the tree cannot be read.
    """
    with compression_lib.open_sink(self.dest, self.compression) as fileobj:
      with tarfile.open(fileobj=fileobj, mode='w|') as tar:
        root = os.stat(self.target)
        self._walk(tar, root)

  def _walk(self, tar, root_stat):
    """Pre-order walk of the tree, without recursion."""
    pending = [('.', root_stat)]
    while pending:
      name, st = pending.pop()
      children = self._process_entry(tar, name, st)
      # Reversed so that children are popped in listing order.
      pending.extend(reversed(children))

  def _fs_path(self, name):
    if name == '.':
      return self.target
    return os.path.join(self.target, *name.split('/'))

  def _list_directory(self, name):
    """Returns (name, lstat result) for each child of directory `name`."""
    children = []
    with os.scandir(self._fs_path(name)) as it:
      for entry in it:
        child = entry.name if name == '.' else name + '/' + entry.name
        children.append((child, entry.stat(follow_symlinks=False)))
    return children

  def archive_name(self, name):
    """Maps a '/' separated path relative to the tree onto its archive name."""
    if self.virtual_path:
      prefix = self.virtual_path.replace(os.path.sep, '/').lstrip('/')
      name = posixpath.normpath(posixpath.join(prefix, name))
    if name == '.':
      return '.'
    return './' + name

  def _header(self, name, info):
    tarinfo = tarfile.TarInfo(self.archive_name(name))
    tarinfo.mode = info.permissions
    tarinfo.mtime = info.mtime
    if self.include_owners and info.has_owner():
      tarinfo.uid = info.uid
      tarinfo.gid = info.gid
    else:
      tarinfo.uid = self.defaults.uid
      tarinfo.gid = self.defaults.gid
    return tarinfo

  def _process_entry(self, tar, name, st):
    """Writes the entry for `name` and returns the children to visit next."""
    if exclude.should_exclude(self.excluded_paths, name):
      return []

    info = file_info.FileStat.from_stat_result(st)
    tarinfo = self._header(name, info)
    kind = info.kind
    if kind is FileKind.DIRECTORY:
      tarinfo.type = tarfile.DIRTYPE
      if not self.include_permissions:
        tarinfo.mode = self.defaults.dir_mode
      tarinfo.name += '/'
      self._addfile(tar, tarinfo)
      return self._list_directory(name)
    elif kind is FileKind.SYMLINK:
      tarinfo.type = tarfile.SYMTYPE
      if not self.include_permissions:
        tarinfo.mode = self.defaults.symlink_mode
      tarinfo.linkname = links.clean_link_name(self.target, name)
      self._addfile(tar, tarinfo)
    elif kind is FileKind.REGULAR:
      self._add_regular_file(tar, name, info, tarinfo)
    elif kind is FileKind.DEVICE:
      tarinfo.type = tarfile.CHRTYPE if info.is_char_device() else tarfile.BLKTYPE
      numbers = self._device_numbers(name)
      if numbers is not None:
        tarinfo.devmajor, tarinfo.devminor = numbers
      self._addfile(tar, tarinfo)
    elif kind is FileKind.SOCKET:
      # Skip, like GNU tar does.
      logger.debug('Skipping socket %s', name)
    else:
      logger.debug('Skipping %s: unsupported file type %o', name,
                   info.mode & 0o170000)
    return []

  def _add_regular_file(self, tar, name, info, tarinfo):
    tarinfo.type = tarfile.REGTYPE
    tarinfo.size = info.size
    if not self.include_permissions:
      tarinfo.mode = self.defaults.file_mode

    if info.is_hard_linked():
      first = self.hard_links.record_or_link(info.inode, tarinfo.name)
      if first is not None:
        tarinfo.type = tarfile.LNKTYPE
        tarinfo.linkname = first
        tarinfo.size = 0

    if tarinfo.type != tarfile.REGTYPE:
      self._addfile(tar, tarinfo)
      return
    with open(self._fs_path(name), 'rb') as f:
      self._addfile(tar, tarinfo, f)

  def _device_numbers(self, name):
    """Returns (major, minor) for the device at `name`, or None."""
    try:
      st = os.stat(self._fs_path(name))
    except OSError as e:
      logger.warning('Cannot read device numbers of %s: %s', name, e)
      return None
    return file_info.FileStat.from_stat_result(st).device_numbers()

  def _addfile(self, tar, tarinfo, fileobj=None):
    logger.debug('Adding %s', tarinfo.name)
    tar.addfile(tarinfo, fileobj)
