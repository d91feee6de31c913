import pytest

from wingetctl.services.winget.classifier import OutputClassifier, WingetOperation


@pytest.mark.parametrize(
    ("operation", "output"),
    [
        (WingetOperation.INSTALL, "Found Git [Git.Git]\nSuccessfully installed"),
        (WingetOperation.INSTALL, "Found an existing package already installed."),
        (WingetOperation.UPDATE, "No available upgrade found.\nPackage is already the latest version"),
        (WingetOperation.UNINSTALL, "Starting package uninstall...\nSuccessfully uninstalled"),
        (WingetOperation.SOURCE_ADD, "Adding source:\n  corp -> https://example.com\nDone\nadded"),
        (WingetOperation.SOURCE_REMOVE, "Removing source: corp...\nremoved"),
        (WingetOperation.SOURCE_UPDATE, "Updating source: winget...\nDone\nupdated successfully"),
        (WingetOperation.SOURCE_RESET, "Resetting source: winget...\nreset"),
    ],
)
def test_known_phrases_are_success(operation: WingetOperation, output: str) -> None:
    assert OutputClassifier().is_success(operation, output)


def test_phrases_are_operation_specific() -> None:
    classifier = OutputClassifier()
    assert not classifier.is_success(WingetOperation.UNINSTALL, "Successfully installed")
    assert not classifier.is_success(WingetOperation.INSTALL, "No package found matching input criteria.")


def test_phrases_are_case_sensitive() -> None:
    assert not OutputClassifier().is_success(WingetOperation.INSTALL, "successfully INSTALLED")


def test_extra_phrases_extend_defaults() -> None:
    classifier = OutputClassifier({"install": ["Erfolgreich installiert"], "bogus": ["x"]})

    assert classifier.is_success(WingetOperation.INSTALL, "Erfolgreich installiert")
    assert classifier.is_success(WingetOperation.INSTALL, "Successfully installed")
    assert "x" not in classifier.phrases(WingetOperation.UPDATE)
