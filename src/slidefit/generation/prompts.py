from __future__ import annotations

from typing import List

from slidefit.dsl.limits import DEFAULT_LIMITS, ContentLimits

LANGUAGE_EN = "en-US"
LANGUAGE_ZH = "zh-CN"
SUPPORTED_LANGUAGES = (LANGUAGE_EN, LANGUAGE_ZH)


SLIDE_DECK_SCHEMA = """
{
  "slides": [
    {
      "layout": "title-content",
      "title": "Slide Title",
      "content": [
        { "type": "paragraph", "text": "Paragraph text..." },
        { "type": "bullets", "items": ["Point 1", "Point 2"] },
        { "type": "code", "language": "python", "lines": ["def foo():", "    pass"] },
        { "type": "table", "headers": ["Col1", "Col2"], "rows": [["Val1", "Val2"]] },
        { "type": "quote", "text": "Quote content", "author": "Author" }
      ]
    }
  ]
}
""".strip()


def is_chinese(language: str) -> bool:
    return language == LANGUAGE_ZH


def build_system_prompt(limits: ContentLimits = DEFAULT_LIMITS, language: str = LANGUAGE_EN) -> str:
    if is_chinese(language):
        return f"""
你是专业的演示文稿设计师。根据章节大纲生成幻灯片内容。

输出格式为JSON，结构如下：
{SLIDE_DECK_SCHEMA}

布局类型(layout)：
- "section": 章节分隔页，只有标题，用于开启新章节
- "title-content": 标题+内容，最常用
- "two-column": 双栏布局，使用leftContent和rightContent

内容块类型：
- paragraph: 文本段落（不超过{limits.max_paragraph_chars}字）
- bullets: 无序列表（不超过{limits.max_list_items}项，每项不超过{limits.max_list_item_chars}字）
- numbered: 有序列表（不超过{limits.max_list_items}项）
- code: 代码块，用lines数组表示每行（不超过{limits.max_code_lines}行）
- table: 表格（不超过{limits.max_table_columns}列×{limits.max_table_rows}行）
- quote: 引用（不超过{limits.max_quote_chars}字）

要求：
1. 每张幻灯片最多{limits.max_blocks_per_slide}个内容块，每栏最多{limits.max_blocks_per_column}个
2. 标题不超过{limits.max_title_chars}字，副标题不超过{limits.max_subtitle_chars}字
3. 内容类型要多样化，不要全是bullets
4. 技术主题必须包含代码示例
5. 数据对比使用表格
6. 重要观点使用引用

只输出JSON，不要其他内容。
""".strip()

    return f"""
You are a professional presentation designer. Generate slide content based on the section outline.

Output format is JSON with the following structure:
{SLIDE_DECK_SCHEMA}

Layout types:
- "section": Section divider, title only, for starting new chapters
- "title-content": Title + content, most common
- "two-column": Two-column layout, uses leftContent and rightContent

Content block types:
- paragraph: Text paragraph (max {limits.max_paragraph_chars} chars)
- bullets: Unordered list (max {limits.max_list_items} items, {limits.max_list_item_chars} chars each)
- numbered: Ordered list (max {limits.max_list_items} items)
- code: Code block, use lines array (max {limits.max_code_lines} lines)
- table: Table (max {limits.max_table_columns} cols x {limits.max_table_rows} rows)
- quote: Quotation (max {limits.max_quote_chars} chars)

Requirements:
1. Maximum {limits.max_blocks_per_slide} content blocks per slide, {limits.max_blocks_per_column} per column
2. Titles at most {limits.max_title_chars} chars, subtitles at most {limits.max_subtitle_chars}
3. Diversify content types, avoid all bullets
4. Technical topics must include code examples
5. Use tables for data comparison
6. Use quotes for important insights

Output only JSON, no other text.
""".strip()


def build_section_prompt(
    *,
    topic: str,
    section_title: str,
    points: List[str],
    section_index: int,
    total_sections: int,
    slide_count: int,
    resource_context: str = "",
    language: str = LANGUAGE_EN,
) -> str:
    numbered = "\n".join(f"{i}. {p}" for i, p in enumerate(points, start=1))
    has_resources = bool(resource_context.strip())

    if is_chinese(language):
        resources = f"\n参考资料：\n{resource_context}\n" if has_resources else ""
        return f"""
主题：{topic}

当前章节（第{section_index}/{total_sections}部分）：{section_title}
章节要点：
{numbered}

需要生成：{slide_count}张内容幻灯片（不包含章节分隔页）
{resources}
请生成{slide_count}张幻灯片的JSON内容。确保：
- 内容丰富，每个要点都有详细展开
- 根据内容特点选择合适的内容块类型
- 如果涉及代码，必须包含可运行的代码示例
- 如果涉及对比，使用表格展示
""".strip()

    resources = f"\nReference Materials:\n{resource_context}\n" if has_resources else ""
    return f"""
Topic: {topic}

Current Section (Part {section_index}/{total_sections}): {section_title}
Section Points:
{numbered}

Generate: {slide_count} content slides (excluding section divider)
{resources}
Generate JSON content for {slide_count} slides. Ensure:
- Rich content with detailed expansion of each point
- Choose appropriate content block types based on content
- Include runnable code examples for technical topics
- Use tables for comparisons
""".strip()


def build_generation_prompt(
    section_prompt: str,
    limits: ContentLimits = DEFAULT_LIMITS,
    language: str = LANGUAGE_EN,
) -> str:
    return f"{build_system_prompt(limits, language)}\n\n{section_prompt}"


def build_repair_prompt(bad_output: str) -> str:
    return f"""
Return ONLY a valid STRICT JSON object (double quotes, no trailing commas).
No markdown. No explanations.

Schema:
{SLIDE_DECK_SCHEMA}

Fix/convert this output into STRICT JSON:
{bad_output}
""".strip()
