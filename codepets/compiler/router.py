from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field, field_validator

from codepets.compiler.runner import JavaRunner, get_runner

router = APIRouter(tags=["Compiler"])

MAX_SOURCE_BYTES = 100 * 1024


class CompileRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    father_code: str = Field(..., alias="fatherCode")
    main_code: str = Field(..., alias="mainCode")

    @field_validator('father_code', 'main_code')
    @classmethod
    def validate_source(cls, v):
        if len(v.encode('utf-8')) > MAX_SOURCE_BYTES:
            raise ValueError('Source code too large (max 100KB)')
        return v


class CompileResponse(BaseModel):
    output: str


@router.post("/compile", response_model=CompileResponse)
async def compile_code(data: CompileRequest, runner: JavaRunner = Depends(get_runner)):
    """
    Compile Father.java and Main.java, then run Main
    `output` carries compiler errors, runtime errors or program stdout
    """
    output = await runner.compile_and_run(data.father_code, data.main_code)
    return {"output": output}
