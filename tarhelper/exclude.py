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
"""Exclusion patterns for tree archiving."""

import fnmatch
import logging
import os
import posixpath

logger = logging.getLogger(__name__)


def normalize_pattern(name):
  """Strips a leading separator so the pattern is relative to the tree root."""
  name = name.replace(os.path.sep, '/')
  if name.startswith('/'):
    name = name[1:]
  return name


def match_path(pattern, name):
  """Glob match where wildcards never cross a '/'.

  `*` and `?` only match within a single path component, so "*.tmp" matches
  "drop.tmp" but not "dir/drop.tmp", and "dir/*" matches "dir/x" but not
  "dir/x/y".

  Args:
    pattern: '/' separated glob pattern.
    name: '/' separated relative path.
  Returns:
    True if every component of `name` matches the matching component of
    `pattern`.
  """
  pattern_parts = pattern.split('/')
  name_parts = name.split('/')
  if len(pattern_parts) != len(name_parts):
    return False
  return all(fnmatch.fnmatchcase(n, p)
             for p, n in zip(pattern_parts, name_parts))


def should_exclude(patterns, name):
  """Returns True if `name` or its last component matches any pattern."""
  base = posixpath.basename(name)
  for pattern in patterns:
    if match_path(pattern, name) or match_path(pattern, base):
      logger.info('Excluding path/file with name %s from tar', name)
      return True
  return False
