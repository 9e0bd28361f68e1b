"""
Data models for the Sui wallet SDK.

Ledger response types are validated at the RPC boundary; outcome types are
what the public workflow methods return and what the HTTP layer serialises.
"""
from typing import Dict, Any, Optional, List

import base58
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _LedgerModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CoinBalance(_LedgerModel):
    """Result of suix_getBalance"""
    coin_type: str = Field(..., alias="coinType")
    coin_object_count: int = Field(0, alias="coinObjectCount")
    total_balance: int = Field(..., alias="totalBalance", ge=0)


class CoinObject(_LedgerModel):
    """One entry of suix_getCoins"""
    coin_object_id: str = Field(..., alias="coinObjectId")
    version: int
    digest: str
    balance: int = Field(..., ge=0)


class GasCostSummary(_LedgerModel):
    """Gas costs reported in transaction effects, in MIST"""
    computation_cost: int = Field(..., alias="computationCost")
    storage_cost: int = Field(..., alias="storageCost")
    storage_rebate: int = Field(0, alias="storageRebate")
    non_refundable_storage_fee: int = Field(0, alias="nonRefundableStorageFee")

    @property
    def gross_cost(self) -> int:
        """Computation plus storage, before any rebate"""
        return self.computation_cost + self.storage_cost


class ExecutionStatus(_LedgerModel):
    status: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


class ObjectRef(_LedgerModel):
    object_id: str = Field(..., alias="objectId")
    version: int
    digest: str


class OwnedObjectRef(_LedgerModel):
    owner: Any = None
    reference: ObjectRef


class TransactionEffects(_LedgerModel):
    status: ExecutionStatus
    gas_used: GasCostSummary = Field(..., alias="gasUsed")
    created: List[OwnedObjectRef] = Field(default_factory=list)


class SuiEvent(_LedgerModel):
    type: str
    parsed_json: Optional[Dict[str, Any]] = Field(None, alias="parsedJson")


class DryRunResult(_LedgerModel):
    """Result of sui_dryRunTransactionBlock"""
    effects: TransactionEffects
    events: List[SuiEvent] = Field(default_factory=list)


class TransactionResult(_LedgerModel):
    """Result of sui_executeTransactionBlock"""
    digest: str
    effects: TransactionEffects
    events: List[SuiEvent] = Field(default_factory=list)

    @field_validator("digest")
    @classmethod
    def _digest_is_base58(cls, value: str) -> str:
        try:
            raw = base58.b58decode(value)
        except ValueError as e:
            raise ValueError(f"digest is not base58: {value!r}") from e
        if len(raw) != 32:
            raise ValueError(f"digest must decode to 32 bytes, got {len(raw)}")
        return value


class ObjectData(_LedgerModel):
    """Object metadata from sui_getObject / suix_getOwnedObjects"""
    object_id: str = Field(..., alias="objectId")
    version: int
    digest: str
    type: Optional[str] = None
    owner: Any = None
    content: Optional[Dict[str, Any]] = None

    @property
    def owner_address(self) -> Optional[str]:
        """Address owning the object, or None for shared/immutable objects"""
        if isinstance(self.owner, dict):
            return self.owner.get("AddressOwner")
        return None

    @property
    def is_shared(self) -> bool:
        return isinstance(self.owner, dict) and "Shared" in self.owner


class OwnedObjectsPage(_LedgerModel):
    data: List[ObjectData] = Field(default_factory=list)
    next_cursor: Optional[str] = Field(None, alias="nextCursor")
    has_next_page: bool = Field(False, alias="hasNextPage")


class _Outcome(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    error: Optional[str] = None
    # exception class name; drives the HTTP status, never serialised
    error_code: Optional[str] = Field(None, exclude=True)

    def to_response(self) -> Dict[str, Any]:
        """JSON body with camelCase keys and unset branches omitted"""
        return self.model_dump(by_alias=True, exclude_none=True)


class TransferOutcome(_Outcome):
    """Result of one funded transfer attempt"""
    transaction_digest: Optional[str] = Field(None, alias="transactionDigest")
    sender_address: Optional[str] = Field(None, alias="senderAddress")

    @model_validator(mode="after")
    def _one_branch(self) -> "TransferOutcome":
        if self.success and (not self.transaction_digest or self.error):
            raise ValueError("successful outcome needs a transactionDigest and no error")
        if not self.success and (not self.error or self.transaction_digest):
            raise ValueError("failed outcome needs an error and no transactionDigest")
        return self


class WalletCreationOutcome(_Outcome):
    """Result of creating a Wallet object on-chain"""
    wallet_object_id: Optional[str] = Field(None, alias="walletObjectId")
    wallet_address: Optional[str] = Field(None, alias="walletAddress")
    transaction_digest: Optional[str] = Field(None, alias="transactionDigest")
    sender_address: Optional[str] = Field(None, alias="senderAddress")

    @model_validator(mode="after")
    def _one_branch(self) -> "WalletCreationOutcome":
        if self.success and (not self.wallet_object_id or not self.transaction_digest or self.error):
            raise ValueError("successful outcome needs walletObjectId and transactionDigest")
        if not self.success and not self.error:
            raise ValueError("failed outcome needs an error")
        return self


class GeneratedAddress(BaseModel):
    """A freshly generated off-chain address and its hex private key"""
    model_config = ConfigDict(populate_by_name=True)

    wallet_address: str = Field(..., alias="walletAddress")
    private_key: str = Field(..., alias="privateKey")
