"""
Shared fixtures: sample manifests written to tmp_path.
"""
import textwrap

import pytest

from manifest_index import setup_logger

ANDROID_NS = "http://schemas.android.com/apk/res/android"

APP_MANIFEST = f"""\
<?xml version="1.0" encoding="utf-8"?>
<manifest xmlns:android="{ANDROID_NS}" package="com.app">
    <uses-sdk android:minSdkVersion="8" android:targetSdkVersion="15"/>
    <uses-sdk android:targetSdkVersion="21"/>
    <uses-sdk android:targetSdkVersion="8"/>
    <uses-permission android:name="android.permission.INTERNET"/>
    <uses-permission android:name="android.permission.INTERNET"/>
    <uses-permission android:name="android.permission.CAMERA"/>
    <application android:name=".App" android:permission="P0">
        <activity android:name=".Main">
            <intent-filter>
                <action android:name="android.intent.action.MAIN"/>
                <category android:name="android.intent.category.LAUNCHER"/>
            </intent-filter>
        </activity>
        <activity android:name="Login" android:readPermission="P1"/>
        <activity android:name="com.other.Settings" android:enabled="false"/>
        <service android:name=".Sync" android:writePermission="P2"/>
        <receiver android:name=".Boot" android:permission="P3" android:readPermission="P4"/>
        <provider android:name=".Files"/>
    </application>
</manifest>
"""


@pytest.fixture
def write_manifest(tmp_path):
    """Returns a function writing XML text to a fresh file and giving back its path."""
    counter = {"n": 0}

    def _write(xml: str) -> str:
        counter["n"] += 1
        path = tmp_path / f"AndroidManifest{counter['n']}.xml"
        path.write_text(textwrap.dedent(xml), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def app_manifest(write_manifest):
    return write_manifest(APP_MANIFEST)


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    setup_logger()


@pytest.fixture
def log_messages():
    """Collects formatted log records at DEBUG level."""
    messages = []
    setup_logger(verbose=True, sink=messages.append)
    return messages
