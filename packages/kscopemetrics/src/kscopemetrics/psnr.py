from __future__ import annotations
import torch


def psnr(y: torch.Tensor, yhat: torch.Tensor) -> torch.Tensor:
    """Per-image PSNR (dB) of [B,C,H,W] tensors with values in [0,1]."""
    mse = torch.mean((y - yhat) ** 2, dim=(1, 2, 3), keepdim=False)
    eps = 1e-12
    return 10.0 * torch.log10(1.0 / torch.clamp(mse, min=eps))


def mae(y: torch.Tensor, yhat: torch.Tensor) -> torch.Tensor:
    return torch.mean((y - yhat).abs(), dim=(1, 2, 3), keepdim=False)
