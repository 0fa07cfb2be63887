from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class OptionLabel(BaseModel):
    value: str
    label: str

class SectionTypeOption(BaseModel):
    id: str
    name: str

class BlockSizeOption(BaseModel):
    width: str
    height: str
    label: str

class LanguageOption(BaseModel):
    id: Literal["en", "te", "hi"]
    name: str
    prompt_name: str

class CatalogRules(BaseModel):
    section_types: list[SectionTypeOption]
    article_categories: list[str]
    text_alignments: list[str]
    font_sizes: list[OptionLabel]
    line_spacings: list[OptionLabel]
    block_sizes: list[BlockSizeOption]
    languages: list[LanguageOption]
    default_language: Literal["en", "te", "hi"] = "en"

    def prompt_language(self, language_id: str) -> str:
        """Human name used inside AI prompts; falls back to English."""
        for lang in self.languages:
            if lang.id == language_id:
                return lang.prompt_name
        return "English"

class ArticleDefaults(BaseModel):
    headline: str
    content: str
    category: str
    font_size: str
    line_spacing: str
    width: str
    height: str

class ImageDefaults(BaseModel):
    image_url: str
    caption: str
    width: str
    height: str

class AdDefaults(BaseModel):
    ad_content: str
    ad_image_url: str | None = None
    target_url: str | None = None
    width: str
    height: str

class BlockDefaultsRules(BaseModel):
    article: ArticleDefaults
    image: ImageDefaults
    ad: AdDefaults

class GenerationRules(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_name: str
    image_model_name: str
    temperature: float = Field(ge=0, le=1)
    top_k: int = Field(gt=0)
    top_p: float = Field(ge=0, le=1)
    text_models: list[str]
    image_models: list[str]
    api_key_env: list[str]

class ImagesRules(BaseModel):
    max_width: int = Field(gt=0)
    quality: float = Field(gt=0, le=1)
    export_width: int = Field(gt=0)
    export_height: int = Field(gt=0)

class DemoAccount(BaseModel):
    email: str
    password: str
    role: Literal["Admin", "Editor"]
    name: str

class AuthRules(BaseModel):
    token_key: str
    demo_accounts: list[DemoAccount]

class OpsRules(BaseModel):
    seed_demo_editions: bool
    data_dir_env: str
    default_data_dir: str

class Rules(BaseModel):
    project: ProjectRules
    catalog: CatalogRules
    block_defaults: BlockDefaultsRules
    generation: GenerationRules
    images: ImagesRules
    auth: AuthRules
    ops: OpsRules
