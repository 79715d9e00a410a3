from uuid import UUID, uuid4

import pytest

from vmapi.errors import UnresolvableImage
from vmapi.models import Disk
from vmapi.resolve import DiskLayout, resolve, resolve_disk_size, resolve_image

VM_UUID = UUID("8a2d4f10-7c3b-4e5d-a6f7-0b1c2d3e4f02")
IMAGE_X = uuid4()
IMAGE_Y = uuid4()
IMAGE_Z = uuid4()


def layout(**kwargs) -> DiskLayout:
    return DiskLayout(vm_uuid=VM_UUID, **kwargs)


def test_flexible_size_wins_over_disk_list():
    disks = [Disk(size=10), Disk(size=20)]
    assert resolve_disk_size(layout(flexible_disk_size=40, disks=disks)) == 40


def test_second_disk_size_used_without_flexible_size():
    disks = [Disk(size=10), Disk(size=20)]
    assert resolve_disk_size(layout(disks=disks)) == 20


@pytest.mark.parametrize("disks", [None, [], [Disk(size=10)]])
def test_disk_size_unresolved(disks):
    assert resolve_disk_size(layout(disks=disks)) is None


def test_data_disk_without_size_is_unresolved():
    assert resolve_disk_size(layout(disks=[Disk(size=10), Disk()])) is None


def test_top_level_image_wins_over_disks():
    disks = [Disk(image_uuid=IMAGE_Y), Disk(image_uuid=IMAGE_Z)]
    assert resolve_image(layout(image_uuid=IMAGE_X, disks=disks)) == IMAGE_X


def test_first_disk_image_used_without_top_level_image():
    disks = [Disk(image_uuid=IMAGE_Y), Disk(image_uuid=IMAGE_Z)]
    assert resolve_image(layout(disks=disks)) == IMAGE_Y


def test_empty_disk_list_is_unresolvable():
    with pytest.raises(UnresolvableImage) as excinfo:
        resolve_image(layout(disks=[]))
    assert excinfo.value.vm_uuid == VM_UUID
    assert excinfo.value.reason == "empty disk list"
    assert str(VM_UUID) in str(excinfo.value)


def test_boot_disk_without_image_is_unresolvable():
    # a later disk's image is not used
    disks = [Disk(size=10), Disk(image_uuid=IMAGE_Z)]
    with pytest.raises(UnresolvableImage) as excinfo:
        resolve_image(layout(disks=disks))
    assert excinfo.value.reason == "first disk has no image_uuid"


def test_no_image_and_no_disks_is_unresolvable():
    with pytest.raises(UnresolvableImage):
        resolve_image(layout(flexible_disk_size=40))


def test_resolve_combines_size_and_image():
    resolved = resolve(layout(flexible_disk_size=25600, image_uuid=IMAGE_X))
    assert resolved.size == 25600
    assert resolved.image == IMAGE_X
