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
"""File metadata and classification for tree archiving."""

import collections
import enum
import os
import stat
from dataclasses import dataclass
from typing import Optional, Tuple

# Modes and owners forced onto entries when the archiver is asked not to
# preserve them. 500 is the first uid/gid reserved for normal users.
ArchiveDefaults = collections.namedtuple(
    'ArchiveDefaults', ['dir_mode', 'file_mode', 'symlink_mode', 'uid', 'gid'])

DEFAULTS = ArchiveDefaults(
    dir_mode=0o755, file_mode=0o644, symlink_mode=0o755, uid=500, gid=500)


class FileKind(enum.Enum):
  """The kinds of filesystem objects the archiver knows about."""
  DIRECTORY = 'directory'
  SYMLINK = 'symlink'
  REGULAR = 'regular'
  DEVICE = 'device'
  SOCKET = 'socket'
  OTHER = 'other'


def classify(mode: int) -> FileKind:
  """Maps st_mode type bits onto a FileKind."""
  if stat.S_ISDIR(mode):
    return FileKind.DIRECTORY
  elif stat.S_ISLNK(mode):
    return FileKind.SYMLINK
  elif stat.S_ISREG(mode):
    return FileKind.REGULAR
  elif stat.S_ISCHR(mode) or stat.S_ISBLK(mode):
    return FileKind.DEVICE
  elif stat.S_ISSOCK(mode):
    return FileKind.SOCKET
  else:
    # FIFOs, doors, whiteouts...
    return FileKind.OTHER


@dataclass
class FileStat:
  """Platform independent view of the metadata of one filesystem object.

  Fields a platform cannot provide are None: inode is absent where st_ino is
  meaningless, uid/gid where there is no POSIX ownership and rdev where
  device numbers are not reported.
  """
  mode: int     # full st_mode, type bits included
  size: int
  mtime: int    # seconds
  nlink: int = 1
  uid: Optional[int] = None
  gid: Optional[int] = None
  inode: Optional[Tuple[int, int]] = None  # (st_dev, st_ino)
  rdev: Optional[int] = None

  @classmethod
  def from_stat_result(cls, st) -> 'FileStat':
    ino = getattr(st, 'st_ino', 0)
    return cls(
        mode=st.st_mode,
        size=st.st_size,
        mtime=int(st.st_mtime),
        nlink=getattr(st, 'st_nlink', 1),
        uid=getattr(st, 'st_uid', None),
        gid=getattr(st, 'st_gid', None),
        inode=(getattr(st, 'st_dev', 0), ino) if ino else None,
        rdev=getattr(st, 'st_rdev', None),
    )

  @property
  def kind(self) -> FileKind:
    return classify(self.mode)

  @property
  def permissions(self) -> int:
    return stat.S_IMODE(self.mode)

  def is_char_device(self) -> bool:
    return stat.S_ISCHR(self.mode)

  def has_owner(self) -> bool:
    return self.uid is not None and self.gid is not None

  def is_hard_linked(self) -> bool:
    """True if other paths may share this object's storage."""
    return self.inode is not None and self.nlink > 1

  def device_numbers(self) -> Optional[Tuple[int, int]]:
    """Returns (major, minor), or None if the platform has no rdev."""
    if self.rdev is None or not hasattr(os, 'major'):
      return None
    return os.major(self.rdev), os.minor(self.rdev)
