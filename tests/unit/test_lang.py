"""Unit tests for assembly source detection."""
import pytest
from amigabuild.utils.lang import is_assembly_source, object_file_name


class TestSourceDetection:

    def test_assembly_extensions(self):
        assert is_assembly_source("main.s")
        assert is_assembly_source("main.S")
        assert is_assembly_source("main.asm")
        assert is_assembly_source("hw.i")

    def test_other_extensions(self):
        assert not is_assembly_source("main.c")
        assert not is_assembly_source("main.o")
        assert not is_assembly_source("Makefile")

    def test_full_paths(self):
        assert is_assembly_source("/home/user/demo/src/copper.s")


class TestObjectFileName:

    def test_extension_replaced(self):
        assert object_file_name("/ws/file1.s") == "file1.o"

    def test_no_extension(self):
        assert object_file_name("/ws/file2") == "file2.o"

    def test_only_last_extension(self):
        assert object_file_name("/ws/demo.part.s") == "demo.part.o"

    def test_hidden_file(self):
        assert object_file_name("/ws/.startup") == ".startup.o"
