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
"""This tool builds tar files from a directory tree."""

import argparse
import logging
import os
import sys
import tarfile

from tarhelper import compression
from tarhelper.archive import TreeArchiver


def _create_argument_parser():
  """Creates the command line arg parser."""
  parser = argparse.ArgumentParser(description='create a tar file',
                                   fromfile_prefix_chars='@')
  parser.add_argument('-o', '--output', type=str, required=True,
                      help='The output tar file path, or - for stdout.')
  parser.add_argument('-d', '--directory', type=str, required=True,
                      help='The directory tree to archive.')
  parser.add_argument(
      '-c', '--compression', type=str, default='none',
      help='Compression of the output: one of %s.' %
      ', '.join(compression.COMPRESSIONS))
  parser.add_argument(
      '--no_permissions', action='store_true',
      help='Use 0755 for directories and symlinks and 0644 for files instead'
           ' of the modes found on disk.')
  parser.add_argument(
      '--owners', action='store_true',
      help='Keep the uid/gid found on disk instead of 500/500.')
  parser.add_argument(
      '-x', '--exclude', action='append', default=[],
      help='A path, file or glob pattern to leave out of the tar. May be'
           ' repeated.')
  parser.add_argument(
      '--virtual_path', type=str, default='',
      help='A path to prepend to every name in the tar.')
  parser.add_argument('-v', '--verbose', action='count', default=0,
                      help='Log excluded paths; twice to log every entry.')
  return parser


def _log_level(verbosity):
  if verbosity >= 2:
    return logging.DEBUG
  if verbosity == 1:
    return logging.INFO
  return logging.WARNING


def _write(args, mode, dest):
  archiver = TreeArchiver(dest, args.directory,
                          compression=mode,
                          include_permissions=not args.no_permissions,
                          include_owners=args.owners,
                          excluded_paths=args.exclude,
                          virtual_path=args.virtual_path)
  archiver.archive()


def main(args):
  logging.basicConfig(level=_log_level(args.verbose),
                      format='%(levelname)s: %(message)s')
  try:
    mode = compression.Compression.from_name(args.compression)
    compression.check_writable(mode)
  except compression.CompressionError as e:
    print('build_tar: %s' % e, file=sys.stderr)
    return 1

  try:
    if args.output == '-':
      _write(args, mode, sys.stdout.buffer)
      sys.stdout.buffer.flush()
    else:
      with open(args.output, 'wb') as dest:
        _write(args, mode, dest)
  except (OSError, tarfile.TarError) as e:
    print('build_tar: %s' % e, file=sys.stderr)
    if args.output != '-' and os.path.exists(args.output):
      os.remove(args.output)
    return 1
  return 0


def console_main():
  arg_parser = _create_argument_parser()
  sys.exit(main(arg_parser.parse_args()))


if __name__ == '__main__':
  console_main()
