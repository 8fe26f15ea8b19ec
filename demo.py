#!/usr/bin/env python3
"""
Demo script for the log pattern compaction system.
"""

import tempfile
from pathlib import Path

from logcompact import MiningConfig, PatternCompactor, compact
from logcompact.io_utils import JSONLWriter


def create_sample_logs():
    """Create a small mixed auth log."""
    return [
        "Dec 10 06:55:46 LabSZ sshd[24200]: reverse mapping checking getaddrinfo for ns.example.com failed",
        "Dec 10 07:28:03 LabSZ sshd[24245]: Failed password for root from 112.95.230.3 port 54087 ssh2",
        "Dec 10 07:28:05 LabSZ sshd[24245]: Failed password for root from 112.95.230.3 port 55618 ssh2",
        "Dec 10 07:28:08 LabSZ sshd[24245]: Failed password for root from 112.95.230.3 port 57138 ssh2",
        "Dec 10 09:32:20 LabSZ sshd[24680]: pam_unix(sshd:session): session opened for user fztu by (uid=0)",
        "Dec 10 09:32:21 LabSZ sshd[24680]: pam_unix(sshd:session): session closed for user fztu by (uid=0)",
        "Dec 10 09:40:11 LabSZ sshd[24701]: Connection closed by 183.62.140.253 [preauth]",
        "Dec 10 09:40:15 LabSZ sshd[24703]: Connection closed by 183.62.140.253 [preauth]",
    ]


def create_sample_report():
    """Create a fragment of a macOS sample report."""
    return [
        "    +   1744 ???  (in Live)  load address 0x104fc4000 + 0x114df74  [0x106111f74]",
        "    + ! 1744 ???  (in Live)  load address 0x104fc4000 + 0x115c9c0  [0x1061209c0]",
        "    + ! : 1744 ???  (in Live)  load address 0x104fc4000 + 0x1e99770  [0x106e5d770]",
        "Binary Images:",
        "       0x104fc4000 -        0x10a1fbfff +com.ableton.live (11.3.4) "
        "<4B0BCBB4-2271-376E-B5C3-CC18D418FC11> /Applications/Ableton Live 11 Suite.app/Contents/MacOS/Live",
        "       0x1a377d000 -        0x1a37bbfff  libsystem_kernel.dylib (10002.81.5) "
        "<CC18D418-2271-376E-B5C3-4B0BCBB4FC11> /usr/lib/system/libsystem_kernel.dylib",
    ]


def main():
    """Run the demo."""
    print("🚀 Log Pattern Compaction Demo")
    print("=" * 50)

    # Step 1: Plain log compaction
    logs = create_sample_logs()
    print(f"\n📝 Input: {len(logs)} auth log lines")
    print("\n📋 Compacted report:")
    print(compact(logs))

    # Step 2: Crash report with tree markers and binary images
    report_lines = create_sample_report()
    config = MiningConfig(strip_indent=True, binary_images=True)
    print(f"\n📝 Input: {len(report_lines)} sample report lines")
    print("\n📋 Compacted report (--strip-indent --binary-images):")
    print(compact(report_lines, config))

    # Step 3: Machine-readable groups
    temp_dir = tempfile.mkdtemp()
    try:
        groups = PatternCompactor().mine(logs)
        groups_file = Path(temp_dir) / "groups.jsonl"
        with JSONLWriter(str(groups_file)) as writer:
            writer.write_groups(groups)
        print(f"\n💾 Wrote {len(groups)} groups to {groups_file.name}:")
        print(groups_file.read_text(encoding="utf-8"))
    finally:
        import shutil
        shutil.rmtree(temp_dir, ignore_errors=True)

    print("🎉 Demo completed successfully!")


if __name__ == '__main__':
    main()
