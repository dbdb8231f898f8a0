"""Tests for the filesystem indexer."""
import os

import pytest

from asset_cleaner.analyzer.indexer import FileIndexer
from asset_cleaner.config import ScanConfig


class TestFixtureApp:
    """Index the static fixture project."""

    def test_asset_files_sorted_and_filtered(self, fixture_app, scan_config):
        indexer = FileIndexer(fixture_app, scan_config)

        assert indexer.scan_asset_files() == [
            'assets/animations/loader.json',
            'assets/icons/logo.svg',
            'assets/icons/settings.svg',
            'assets/images/banner.jpg',
            'assets/images/bg.png',
            'assets/images/legacy.png',
            'assets/images/orphan.webp',
        ]

    def test_code_files_skip_ignored_dirs(self, fixture_app, scan_config):
        indexer = FileIndexer(fixture_app, scan_config)
        code_files = indexer.scan_code_files()

        assert 'lib/build/generated.dart' not in code_files, \
            "Files under an ignored 'build' segment must not be scanned"
        assert code_files == [
            'lib/constants/assets.dart',
            'lib/main.dart',
            'lib/widgets/banner.dart',
            'lib/widgets/v2.dart',
            'test/widget_test.dart',
        ]

    def test_file_size(self, fixture_app, scan_config):
        indexer = FileIndexer(fixture_app, scan_config)
        expected = (fixture_app / 'assets/images/legacy.png').stat().st_size

        assert indexer.file_size('assets/images/legacy.png') == expected
        assert indexer.file_size('assets/images/nope.png') == 0


class TestIgnoreMatching:
    """Ignore entries match whole path segments only."""

    def test_segment_not_substring(self, make_project, scan_config):
        root = make_project({
            'lib/buildings/city.dart': 'class City {}',
            'lib/build/out.dart': 'class Out {}',
        })
        code_files = FileIndexer(root, scan_config).scan_code_files()

        assert code_files == ['lib/buildings/city.dart']

    def test_multi_segment_entry(self, make_project):
        config = ScanConfig(code_roots=('lib', 'ios'), ignore_dirs=frozenset({'ios/Pods'}))
        root = make_project({
            'ios/Pods/Thing/readme.md': 'pod',
            'ios/Runner/notes.md': 'runner',
            'lib/Pods/keep.dart': 'keep',
        })

        assert FileIndexer(root, config).scan_code_files() == [
            'ios/Runner/notes.md',
            'lib/Pods/keep.dart',
        ]

    def test_ignore_set_not_applied_to_assets(self, make_project):
        config = ScanConfig(ignore_dirs=frozenset({'build'}))
        root = make_project({'assets/build/icon.png': b'png'})

        assert FileIndexer(root, config).scan_asset_files() == ['assets/build/icon.png']


class TestEdgeCases:

    def test_missing_roots_are_skipped(self, tmp_path, scan_config):
        indexer = FileIndexer(tmp_path, scan_config)

        assert indexer.scan_asset_files() == []
        assert indexer.scan_code_files() == []
        assert indexer.errors == []

    def test_extension_match_is_case_insensitive(self, make_project, scan_config):
        root = make_project({
            'assets/Photo.PNG': b'x',
            'assets/notes.txt': 'not an asset',
        })

        assert FileIndexer(root, scan_config).scan_asset_files() == ['assets/Photo.PNG']

    @pytest.mark.skipif(not hasattr(os, 'symlink'), reason="symlinks unsupported")
    def test_symlinks_excluded(self, make_project, scan_config):
        root = make_project({'assets/real.png': b'real'})
        try:
            os.symlink(root / 'assets' / 'real.png', root / 'assets' / 'link.png')
        except OSError:
            pytest.skip("cannot create symlinks here")

        assert FileIndexer(root, scan_config).scan_asset_files() == ['assets/real.png']

    def test_paths_deduplicated_across_overlapping_roots(self, make_project):
        config = ScanConfig(code_roots=('lib', 'lib/src'))
        root = make_project({'lib/src/a.dart': 'a'})

        assert FileIndexer(root, config).scan_code_files() == ['lib/src/a.dart']


class TestWalkErrors:
    """Filesystem errors are recorded and the walk continues."""

    def test_walk_error_recorded_and_siblings_kept(self, make_project, scan_config, monkeypatch):
        root = make_project({'assets/ok/a.png': b'a', 'assets/ok/b.png': b'b'})
        locked = str(root / 'assets' / 'locked')
        real_walk = os.walk

        def walk_with_error(top, onerror=None, followlinks=False):
            onerror(PermissionError(13, 'Permission denied', locked))
            yield from real_walk(top, onerror=onerror, followlinks=followlinks)

        monkeypatch.setattr(os, 'walk', walk_with_error)
        indexer = FileIndexer(root, scan_config)

        assert indexer.scan_asset_files() == ['assets/ok/a.png', 'assets/ok/b.png']
        assert indexer.errors == [(locked, 'Permission denied')]

    @pytest.mark.skipif(not hasattr(os, 'geteuid') or os.geteuid() == 0,
                        reason="needs a non-root POSIX user")
    def test_unreadable_directory_skipped(self, make_project, scan_config):
        root = make_project({'assets/ok/a.png': b'a', 'assets/locked/b.png': b'b'})
        locked = root / 'assets' / 'locked'
        locked.chmod(0)
        try:
            indexer = FileIndexer(root, scan_config)
            asset_files = indexer.scan_asset_files()
        finally:
            locked.chmod(0o755)

        assert asset_files == ['assets/ok/a.png']
        assert any(path.endswith('locked') for path, _ in indexer.errors)

    def test_file_size_error_recorded(self, fixture_app, scan_config):
        indexer = FileIndexer(fixture_app, scan_config)

        assert indexer.file_size('assets/images/nope.png') == 0
        assert [path for path, _ in indexer.errors] == ['assets/images/nope.png']
