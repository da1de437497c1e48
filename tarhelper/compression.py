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
"""Output compression for tar streams."""

import contextlib
import enum
import gzip


class CompressionError(ValueError):
  pass


class Compression(enum.Enum):
  NONE = 'none'
  GZIP = 'gzip'
  BZIP2 = 'bzip2'
  # Only meaningful when reading an archive.
  DETECT = 'detect'

  def __str__(self):
    return self.value

  @classmethod
  def from_name(cls, name):
    """Parses a compression name such as 'gz' or 'none'."""
    try:
      return _ALIASES[(name or '').strip().lower()]
    except KeyError:
      raise CompressionError('unknown compression type: %s' % name) from None


_ALIASES = {
    '': Compression.NONE,
    'none': Compression.NONE,
    'gz': Compression.GZIP,
    'tgz': Compression.GZIP,
    'gzip': Compression.GZIP,
    'bz2': Compression.BZIP2,
    'bzip2': Compression.BZIP2,
    'detect': Compression.DETECT,
}

# Names accepted on the command line.
COMPRESSIONS = tuple(c.value for c in Compression)


def check_writable(compression):
  """Raises CompressionError unless `compression` can be used for writing."""
  if compression is Compression.NONE or compression is Compression.GZIP:
    return
  if compression is Compression.BZIP2:
    raise CompressionError('bzip2 compression is not supported')
  if compression is Compression.DETECT:
    raise CompressionError(
        'not a valid compression type for writing: %s' % compression)
  raise CompressionError('unknown compression type: %s' % (compression,))


@contextlib.contextmanager
def open_sink(dest, compression, mtime=0):
  """Wraps `dest` in the compressor selected by `compression`.

  The mode is checked before anything is written to `dest`. The compressor,
  if any, is closed on every exit path; `dest` itself is never closed.

  Args:
    dest: a writable binary file object.
    compression: a Compression value.
    mtime: timestamp to store in the gzip header.
  Yields:
    the file object the tar encoder should write to.
  Raises:
    CompressionError: if the mode cannot be used for writing.
  """
  check_writable(compression)
  if compression is Compression.GZIP:
    with gzip.GzipFile(fileobj=dest, mode='wb', compresslevel=9,
                       mtime=mtime) as fileobj:
      yield fileobj
  else:
    yield dest
