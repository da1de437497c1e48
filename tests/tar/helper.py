import io
import os
import tarfile


def read_members(data, mode="r:*"):
  """Returns [(TarInfo, content or None)] for the tar held in `data`."""
  members = []
  with tarfile.open(fileobj=io.BytesIO(data), mode=mode) as f:
    for current in f:
      content = f.extractfile(current).read() if current.isfile() else None
      members.append((current, content))
  return members


def _check_entry(test_class, current, content, expected, got_names):
  for k, v in expected.items():
    if k == "data":
      value = content
    elif k == "name" and os.name == "nt":
      value = getattr(current, k).replace("\\", "/")
    else:
      value = getattr(current, k)
    error_msg = " ".join([
        "Value `%s` for key `%s` of file" % (value, k),
        "%s does" % current.name,
        "not match expected value `%s`" % v
        ])
    error_msg += str(got_names)
    test_class.assertEqual(value, v, error_msg)


def assertTarFileContent(test_class, data, content):
  """Assert that the tar in `data` contains exactly the entries of `content`.

  Args:
      data: the bytes of the TAR file to test.
      content: an array describing the expected content of the TAR file, in
          order. Each entry in that list should be a dictionary where each
          field is a field to test in the corresponding TarInfo. For
          testing the presence of a file "x", then the entry could simply
          be `{"name": "x"}`, the missing field will be ignored. To match
          the content of a file entry, use the key "data".
  """
  members = read_members(data)
  got_names = [m.name for m, _ in members]
  for i, (current, current_data) in enumerate(members):
    test_class.assertLess(
        i, len(content), "Extraneous file at end of archive: %s" % current.name)
    _check_entry(test_class, current, current_data, content[i], got_names)
  if len(members) < len(content):
    test_class.fail("Missing file %s in archive" % content[len(members)])


def assertTarFileMembers(test_class, data, content):
  """Like assertTarFileContent, but ignores the order of the entries.

  Directory listings are not sorted, so siblings may come in any order.
  Entries are matched by name.
  """
  members = read_members(data)
  got_names = [m.name for m, _ in members]
  test_class.assertCountEqual(got_names, [c["name"] for c in content])
  by_name = {m.name: (m, d) for m, d in members}
  for expected in content:
    current, current_data = by_name[expected["name"]]
    _check_entry(test_class, current, current_data, expected, got_names)


def assertPreOrder(test_class, data):
  """Assert that every directory comes before everything below it."""
  names = [m.name for m, _ in read_members(data)]
  for i, name in enumerate(names):
    for earlier in names[i + 1:]:
      test_class.assertFalse(
          name.startswith(earlier + "/"),
          "%s is written before its directory %s" % (name, earlier))
