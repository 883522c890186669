"""Prediction result models."""

from typing import List

from pydantic import BaseModel, Field


class ColumnPrediction(BaseModel):
    """Best guess for the next number of a single column."""
    column: int = Field(..., ge=1, description="Column identifier")
    predicted_number: int = Field(..., description="Highest scoring number")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Relative strength of the top score")
    alternatives: List[int] = Field(default_factory=list, description="Next best numbers by score")
    reasoning: List[str] = Field(default_factory=list, description="Factors behind the prediction")
    score: float = Field(0.0, ge=0.0, description="Raw score of the predicted number")


class PredictionResult(BaseModel):
    """Predicted combination across every column."""
    combination: List[int] = Field(..., description="One number per primary column")
    secondary_prediction: int = Field(..., description="Predicted secondary number")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Mean of the per-column confidences")
    reasoning: List[str] = Field(default_factory=list, description="Distinct contributing factors")
    column_predictions: List[ColumnPrediction] = Field(default_factory=list, description="Per-column detail")
