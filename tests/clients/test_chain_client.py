from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from web3 import Web3

from stable_vault.clients.chain import ChainClient, TransactionReverted

# Well-known development key; never funded on a real network
DEV_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEV_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


@pytest.fixture
def w3():
    w3 = MagicMock()
    w3.eth.get_transaction_count.return_value = 3
    w3.eth.send_raw_transaction.return_value = MagicMock(hex=lambda: "0xabc")
    return w3


def test_address_from_private_key(w3):
    client = ChainClient("http://localhost:8545", DEV_KEY, w3=w3)
    assert client.address == DEV_ADDRESS
    assert Web3.is_checksum_address(client.address)


def test_address_requires_key(w3):
    client = ChainClient("http://localhost:8545", None, w3=w3)
    with pytest.raises(ValueError, match="private_key"):
        _ = client.address


@pytest.mark.asyncio
async def test_call_runs_contract_call(w3):
    client = ChainClient("http://localhost:8545", None, w3=w3)
    fn = MagicMock()
    fn.call.return_value = 5

    assert await client.call(fn, transaction={"from": DEV_ADDRESS}) == 5
    fn.call.assert_called_once_with(transaction={"from": DEV_ADDRESS})


@pytest.mark.asyncio
async def test_native_balance(w3):
    w3.eth.get_balance.return_value = 10**18
    client = ChainClient("http://localhost:8545", None, w3=w3)

    assert await client.native_balance(DEV_ADDRESS.lower()) == 10**18
    w3.eth.get_balance.assert_called_once_with(DEV_ADDRESS)


def _signed_client(w3) -> ChainClient:
    client = ChainClient("http://localhost:8545", None, w3=w3)
    client.account = MagicMock(address=DEV_ADDRESS)
    client.account.sign_transaction.return_value = MagicMock(raw_transaction=b"\x01")
    return client


@pytest.mark.asyncio
async def test_transact_signs_and_waits_for_receipt(w3):
    receipt = {"status": 1, "blockNumber": 10, "gasUsed": 21000}
    w3.eth.wait_for_transaction_receipt.return_value = receipt
    client = _signed_client(w3)
    fn = MagicMock(fn_name="transfer")
    fn.build_transaction.return_value = {"to": "0x"}

    assert await client.transact(fn, value=7) == receipt

    fn.build_transaction.assert_called_once_with(
        {"from": DEV_ADDRESS, "nonce": 3, "value": 7}
    )
    w3.eth.send_raw_transaction.assert_called_once_with(b"\x01")


@pytest.mark.asyncio
async def test_transact_raises_on_failed_status(w3):
    w3.eth.wait_for_transaction_receipt.return_value = {
        "status": 0,
        "blockNumber": 10,
        "gasUsed": 21000,
    }
    client = _signed_client(w3)

    with pytest.raises(TransactionReverted, match="0xabc"):
        await client.transact(MagicMock(fn_name="approve"))
    w3.eth.send_raw_transaction.assert_called_once()


@pytest.mark.asyncio
async def test_latest_timestamp(w3):
    w3.eth.get_block.return_value = {"timestamp": 1_700_000_000, "number": 1}
    client = ChainClient("http://localhost:8545", None, w3=w3)

    assert await client.latest_timestamp() == 1_700_000_000
    w3.eth.get_block.assert_called_once_with("latest")
