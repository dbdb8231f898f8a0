"""Tests for byte formatting, the Markdown report and the deletion script."""
import os
import stat

import pytest

from asset_cleaner.analyzer.engine import analyze_project
from asset_cleaner.config import ScanConfig
from asset_cleaner.reaper.delete_script import escape_shell_arg, generate_delete_script, write_delete_script
from asset_cleaner.reporter.markdown import ReportGenerator
from asset_cleaner.utils.formatting import extension_of, format_bytes
from asset_cleaner.utils.logger import sanitize_for_terminal


class TestFormatBytes:

    @pytest.mark.parametrize('num_bytes, expected', [
        (0, '0 B'),
        (-3, '0 B'),
        (5, '5 B'),
        (1023, '1023 B'),
        (1024, '1.0 KB'),
        (1536, '1.5 KB'),
        (1024 * 1024, '1.0 MB'),
        (3 * 1024 ** 3, '3.0 GB'),
        (5 * 1024 ** 4, '5120.0 GB'),
    ])
    def test_units(self, num_bytes, expected):
        assert format_bytes(num_bytes) == expected

    def test_extension_of(self):
        assert extension_of('assets/Icon.PNG') == '.png'
        assert extension_of('assets/LICENSE') == ''


@pytest.fixture
def scenario(make_project):
    root = make_project({
        'assets/a.png': b'12345',
        'assets/b.svg': b'0123456789',
        "assets/it's.gif": b'123',
        'lib/icons.dart': "class Icons {\n  static const String logo = 'assets/b.svg';\n"
                          "  static const String ghost = 'assets/ghost.svg';\n}\n",
        'lib/main.dart': 'Image.asset(Icons.logo);\n',
    })
    config = ScanConfig(direct_groups=('Icons',), alias_groups=())
    return root, config, analyze_project(root, config)


class TestMarkdownReport:

    def test_overview(self, scenario):
        _, config, result = scenario
        report = ReportGenerator(config).render(result)

        assert '| Total Assets | 3 |' in report
        assert '| ✅ Used | 1 |' in report
        assert '| ❌ Unused | 2 |' in report
        assert '| 🎯 **Potential Savings** | **8 B** |' in report

    def test_extension_breakdown(self, scenario):
        _, config, result = scenario
        report = ReportGenerator(config).render(result)

        assert '| `.png` | 1 | 5 B |' in report
        assert '| `.svg` | 1 | 10 B |' in report

    def test_unused_list_sorted(self, scenario):
        _, config, result = scenario
        report = ReportGenerator(config).render(result)

        assert report.index('- `assets/a.png`') < report.index("- `assets/it's.gif`")
        assert '- `assets/b.svg`' not in report

    def test_diagnostics_section(self, scenario):
        _, config, result = scenario
        report = ReportGenerator(config).render(result)

        assert '`Icons.ghost` points to missing file `assets/ghost.svg`' in report

    def test_write_creates_parent_dirs(self, scenario, tmp_path):
        _, config, result = scenario
        target = tmp_path / 'out' / 'nested' / 'report.md'

        written = ReportGenerator(config).write(result, target)

        assert written == target
        assert target.read_text(encoding='utf-8').startswith('# 🧹 Asset Cleanup Report')

    def test_write_failure_raises(self, scenario, tmp_path):
        _, config, result = scenario
        blocker = tmp_path / 'blocker'
        blocker.write_text('a file, not a directory')

        with pytest.raises(OSError):
            ReportGenerator(config).write(result, blocker / 'report.md')


class TestDeleteScript:

    def test_largest_first_and_quoted(self):
        script = generate_delete_script(
            {'assets/small.png', 'assets/big.png', "assets/it's.gif"},
            {'assets/small.png': 1, 'assets/big.png': 2048, "assets/it's.gif": 10},
        )
        rm_lines = [line for line in script.splitlines() if line.startswith('rm -f')]

        assert script.startswith('#!/usr/bin/env bash\nset -euo pipefail\n')
        assert rm_lines == [
            "rm -f 'assets/big.png'",
            "rm -f 'assets/it'\\''s.gif'",
            "rm -f 'assets/small.png'",
        ]
        assert 'Deleting 3 unused asset files' in script

    def test_escape_shell_arg(self):
        assert escape_shell_arg("a'b") == "'a'\\''b'"

    @pytest.mark.skipif(os.name == 'nt', reason="POSIX permission bits")
    def test_written_script_is_executable(self, tmp_path):
        path = write_delete_script('#!/usr/bin/env bash\n', tmp_path / 'delete_unused_assets.sh')

        assert os.stat(path).st_mode & stat.S_IXUSR


class TestTerminalSanitizing:

    def test_icons_replaced_when_forced(self):
        assert sanitize_for_terminal('✓ done → 🧹', force=True) == '[OK] done -> [cleaner]'

    def test_plain_text_untouched(self):
        assert sanitize_for_terminal('assets/a.png', force=True) == 'assets/a.png'
