"""Tests for trash-based deletion and restoration."""
import pytest

from asset_cleaner.reaper.manifest import Manifest
from asset_cleaner.reaper.safe_delete import DEFAULT_TRASH_DIR, SafeDeleter


@pytest.fixture
def project(make_project):
    return make_project({
        'assets/a.png': b'aaaaa',
        'assets/icons/b.svg': b'<svg/>',
    })


class TestSafeDeleter:

    def test_delete_moves_to_trash(self, project):
        deleter = SafeDeleter(project)

        deletion_id = deleter.delete('assets/a.png')

        assert not (project / 'assets/a.png').exists()
        record = deleter.manifest.get_deletion(deletion_id)
        assert record['size_bytes'] == 5
        assert record['reason'] == 'unused-asset'
        assert (project / DEFAULT_TRASH_DIR / deletion_id / 'a.png').read_bytes() == b'aaaaa'

    def test_delete_missing_file_raises(self, project):
        with pytest.raises(FileNotFoundError):
            SafeDeleter(project).delete('assets/nope.png')

    def test_restore_puts_file_back(self, project):
        deleter = SafeDeleter(project)
        deletion_id = deleter.delete('assets/icons/b.svg')

        deleter.restore(deletion_id)

        assert (project / 'assets/icons/b.svg').read_bytes() == b'<svg/>'
        assert deleter.manifest.get_deletion(deletion_id)['restored'] is True

    def test_restore_unknown_id_raises(self, project):
        with pytest.raises(ValueError):
            SafeDeleter(project).restore('19700101_000000_abcdef')

    def test_delete_multiple_shares_batch_and_continues_on_failure(self, project):
        deleter = SafeDeleter(project)

        outcome = deleter.delete_multiple(['assets/a.png', 'assets/nope.png', 'assets/icons/b.svg'])

        assert len(outcome.deletion_ids) == 2
        assert [path for path, _ in outcome.failures] == ['assets/nope.png']
        batch = deleter.manifest.get_batch(outcome.batch_id)
        assert {record['id'] for record in batch} == set(outcome.deletion_ids)

    def test_restore_batch(self, project):
        deleter = SafeDeleter(project)
        outcome = deleter.delete_multiple(['assets/a.png', 'assets/icons/b.svg'])

        restored = deleter.restore_batch(outcome.batch_id)

        assert restored == 2
        assert (project / 'assets/a.png').exists()
        assert (project / 'assets/icons/b.svg').exists()
        assert deleter.get_trash_info()['unrestored_count'] == 0

    def test_restore_all_reports_failures(self, project):
        deleter = SafeDeleter(project)
        deletion_id = deleter.delete('assets/a.png')

        with pytest.raises(IOError, match='unknown'):
            deleter.restore_all([deletion_id, 'unknown'])

        assert (project / 'assets/a.png').exists(), "Valid IDs are restored despite other failures"


class TestManifest:

    def test_latest_batch_ignores_restored(self, tmp_path):
        manifest = Manifest(tmp_path / 'trash')
        manifest.add_deletion('1', '/p/a.png', '/t/1/a.png', 'unused-asset', 'h', batch_id='old')
        manifest.add_deletion('2', '/p/b.png', '/t/2/b.png', 'unused-asset', 'h', batch_id='new')
        manifest.mark_restored('2')

        assert manifest.latest_batch_id() == 'old'

    def test_corrupt_manifest_reads_as_empty(self, tmp_path):
        trash = tmp_path / 'trash'
        trash.mkdir()
        (trash / 'manifest.json').write_text('{not json')

        assert Manifest(trash).get_all_deletions() == []

    def test_file_hash(self, tmp_path):
        target = tmp_path / 'x.bin'
        target.write_bytes(b'')

        assert Manifest.calculate_file_hash(target) == \
            'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
