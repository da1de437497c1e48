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
"""Hard link and symbolic link handling for tree archiving."""

import os


class HardLinkTracker(object):
  """Remembers the first archive name seen for each multiply linked inode.

  The standard usage is:

    first = tracker.record_or_link(inode, name)
    if first is None:
      # write `name` as a regular file with content
    else:
      # write `name` as a hard link entry pointing at `first`

  Only files whose link count is greater than one should be passed in. The
  table is never pruned: it lives as long as the tracker.
  """

  def __init__(self):
    self._first_names = {}

  def record_or_link(self, inode, name):
    """Records `name` for `inode` or returns the name recorded earlier.

    Args:
      inode: hashable identifier of the underlying storage object.
      name: the archive name of the entry being written.
    Returns:
      None the first time `inode` is seen, otherwise the archive name that
      was recorded for it.
    """
    first = self._first_names.get(inode)
    if first is None:
      self._first_names[inode] = name
    return first

  def __contains__(self, inode):
    return inode in self._first_names

  def __len__(self):
    return len(self._first_names)


def _is_within(path, root):
  try:
    return os.path.commonpath([path, root]) == root
  except ValueError:
    # Paths on different drives.
    return False


def clean_link_name(target_dir, name):
  """Computes the archive target of the symlink at `name` under `target_dir`.

  Targets that resolve inside `target_dir` are rewritten relative to the
  directory holding the link, so that they survive being extracted anywhere.
  Targets that escape `target_dir` are kept as cleaned absolute paths.

  Args:
    target_dir: the root of the tree being archived.
    name: path of the symlink, relative to `target_dir`.
  Returns:
    the link target to store in the archive, '/' separated.
  Raises:
    OSError: if the link cannot be read.
  """
  link_dir = os.path.dirname(name)
  link = os.readlink(os.path.join(target_dir, name))

  # Even an absolute target is made relative below if it is inside the tree.
  if not os.path.isabs(link):
    link = os.path.abspath(os.path.join(target_dir, link_dir, link))
  link = os.path.normpath(link)

  root = os.path.abspath(target_dir)
  if _is_within(link, root):
    link = os.path.relpath(link, os.path.join(root, link_dir))
  return link.replace(os.path.sep, '/')
