#!/usr/bin/env python3
"""
Tests for target-state reads
"""

import pytest
from unittest.mock import MagicMock, patch

from deployment.target import Web3TargetReader, connect, exp, same_address

ADMIN = '0x10d6a54a4754c8869d6886b5f5d7fbfa5b452223'
TOKEN = '0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2'


def test_exp():
    """Test exp expresses amounts in token base units"""
    assert exp(1_000_000, 18) == 10 ** 24
    assert exp(0.01, 18) == 10 ** 16
    assert exp(20, 8) == 2_000_000_000
    assert exp(5) == 5


def test_same_address():
    """Test a storage word matches the address held in its low 160 bits"""
    word = bytes(12) + bytes.fromhex(ADMIN[2:])
    assert same_address(word, ADMIN)
    assert same_address('0x' + word.hex(), ADMIN.upper().replace('0X', '0x'))
    assert same_address(int(ADMIN, 16), ADMIN)
    assert not same_address(bytes(32), ADMIN)
    assert not same_address('0x', ADMIN)


class TestWeb3TargetReader:
    """Test class for Web3TargetReader"""

    def setup_method(self):
        """Set up a mocked web3 instance"""
        self.w3 = MagicMock()
        self.w3.to_checksum_address.side_effect = lambda a: a
        self.reader = Web3TargetReader(self.w3)

    def test_storage_at(self):
        """Test storage slots are read by integer slot"""
        self.w3.eth.get_storage_at.return_value = b'\x01' * 32

        value = self.reader.storage_at(TOKEN, '0x10')

        assert value == b'\x01' * 32
        self.w3.eth.get_storage_at.assert_called_once_with(TOKEN, 16)

    def test_has_code(self):
        """Test code presence"""
        self.w3.eth.get_code.return_value = b''
        assert not self.reader.has_code(TOKEN)
        self.w3.eth.get_code.return_value = b'\x60\x80'
        assert self.reader.has_code(TOKEN)

    def test_balance_of(self):
        """Test ERC-20 balance reads go through the contract"""
        contract = self.w3.eth.contract.return_value
        contract.functions.balanceOf.return_value.call.return_value = 42

        assert self.reader.balance_of(TOKEN, ADMIN) == 42
        contract.functions.balanceOf.assert_called_once_with(ADMIN)

    def test_decimals(self):
        """Test ERC-20 decimals reads"""
        contract = self.w3.eth.contract.return_value
        contract.functions.decimals.return_value.call.return_value = 6

        assert self.reader.decimals(TOKEN) == 6


class TestConnect:
    """Test class for connect"""

    @patch('deployment.target.Web3')
    def test_connect_success(self, mock_web3):
        """Test a connected provider is returned"""
        w3 = mock_web3.return_value
        w3.is_connected.return_value = True

        assert connect('http://localhost:8545') is w3
        w3.middleware_onion.inject.assert_called_once()

    @patch('deployment.target.Web3')
    def test_connect_failure(self, mock_web3):
        """Test an unreachable node raises"""
        mock_web3.return_value.is_connected.return_value = False

        with pytest.raises(ConnectionError):
            connect('http://localhost:1')
